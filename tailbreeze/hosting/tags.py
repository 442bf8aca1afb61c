"""Link tag rendering for templates."""

from typing import Optional

from markupsafe import Markup, escape

_FALLBACK_SCRIPT = (
    "var s=document.createElement('script');"
    "s.src={url};"
    "document.head.appendChild(s);"
)


def render_link_tag(
    serve_path: str,
    is_development: bool,
    cdn_fallback_url: Optional[str] = None,
) -> Markup:
    """
    Render the stylesheet ``<link>`` element.

    Args:
        serve_path: URL of the compiled stylesheet
        is_development: Adds ``data-tailbreeze="true"`` when set
        cdn_fallback_url: When given, an ``onerror`` handler loads this
            script if the stylesheet fails to load

    Returns:
        Markup safe to embed in a template

    Example:
        >>> render_link_tag("/tailbreeze/app.css", False)
        Markup('<link rel="stylesheet" href="/tailbreeze/app.css">')
    """
    attrs = ['rel="stylesheet"', f'href="{escape(serve_path)}"']

    if is_development:
        attrs.append('data-tailbreeze="true"')

    if cdn_fallback_url:
        # The URL is embedded as a JS string literal inside an HTML attribute
        js_url = "'" + cdn_fallback_url.replace("\\", "\\\\").replace("'", "\\'") + "'"
        script = _FALLBACK_SCRIPT.format(url=js_url)
        attrs.append(f'onerror="{escape(script)}"')

    return Markup(f"<link {' '.join(attrs)}>")


__all__ = ["render_link_tag"]
