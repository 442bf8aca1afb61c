"""
Flask integration.

Usage:
    from flask import Flask
    from tailbreeze import Tailbreeze

    app = Flask(__name__)
    app.config["TAILBREEZE"] = {"tailwind_version": "4"}
    Tailbreeze(app)

Templates can then use ``{{ tailwind_link() }}``.

Options are taken, in order, from the ``options`` argument, the
``TAILBREEZE`` config mapping, or the YAML file named by
``TAILBREEZE_CONFIG_FILE``. Without any of these the defaults apply.
"""

import atexit
import logging
import threading
from pathlib import Path
from typing import Optional

from flask import Flask, Response, request

from tailbreeze.config.parser import (
    TailbreezeOptions,
    options_from_mapping,
    parse_config,
)
from tailbreeze.hosting.environment import (
    HostEnvironment,
    resolve_settings,
    resolver_from_options,
)
from tailbreeze.hosting.serving import ServingLayer
from tailbreeze.hosting.supervisor import Supervisor
from tailbreeze.hosting.tags import render_link_tag
from tailbreeze.tailwind.provisioner import Provisioner

logger = logging.getLogger(__name__)

EXTENSION_KEY = "tailbreeze"


def load_options(app: Flask) -> TailbreezeOptions:
    """
    Read options from the application config.

    Raises:
        ConfigError: If the configured options are invalid
    """
    configured = app.config.get("TAILBREEZE")
    if isinstance(configured, TailbreezeOptions):
        return configured
    if configured is not None:
        return options_from_mapping(configured)

    config_file = app.config.get("TAILBREEZE_CONFIG_FILE")
    if config_file:
        path = Path(config_file)
        if not path.is_absolute():
            path = Path(app.root_path) / path
        return parse_config(path)

    return TailbreezeOptions()


class Tailbreeze:
    """
    Flask extension that compiles, watches and serves Tailwind CSS.

    Attributes:
        options: Options in effect
        supervisor: Owns the watch process
        serving: Answers requests for the stylesheet
    """

    def __init__(
        self,
        app: Optional[Flask] = None,
        options: Optional[TailbreezeOptions] = None,
        start: bool = True,
        provisioner: Optional[Provisioner] = None,
    ):
        self.options = options
        self.start_on_init = start
        self.provisioner = provisioner
        self.supervisor: Optional[Supervisor] = None
        self.serving: Optional[ServingLayer] = None
        self._shutdown_lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Bind the extension to ``app``.

        Raises:
            ConfigError: If the options are invalid
        """
        if self.options is None:
            self.options = load_options(app)
        options = self.options

        environment = HostEnvironment.from_flask(app)
        settings = resolve_settings(options, environment)
        resolver = resolver_from_options(options)

        self.supervisor = Supervisor(options, environment, provisioner=self.provisioner)
        self.serving = ServingLayer(
            settings,
            options.serve_path,
            serve_via_middleware=options.serve_via_middleware,
            resolver=resolver,
        )

        app.before_request(self._serve_stylesheet)
        app.add_template_global(self.link_tag, name="tailwind_link")
        app.extensions[EXTENSION_KEY] = self

        if self.start_on_init:
            self.start()
        atexit.register(self.shutdown)

    def start(self, cancel_event: Optional[threading.Event] = None) -> None:
        self.supervisor.start(cancel_event=cancel_event)

    def shutdown(self) -> None:
        """Stop the watch process. Safe to call more than once."""
        with self._shutdown_lock:
            if self.supervisor is not None:
                self.supervisor.stop()

    def link_tag(self, cdn_fallback: bool = False):
        """Template global rendering the stylesheet ``<link>`` element."""
        settings = self.serving.settings
        fallback_url = None
        if cdn_fallback and settings.fallback_enabled:
            fallback_url = self.serving.resolver.cdn_fallback_url(settings.version)
        return render_link_tag(
            self.options.serve_path,
            settings.is_development,
            cdn_fallback_url=fallback_url,
        )

    def _serve_stylesheet(self):
        if request.method not in ("GET", "HEAD"):
            return None

        result = self.serving.handle(request.path)
        if result is None:
            return None

        return Response(result.body, status=result.status, headers=result.headers)


__all__ = ["Tailbreeze", "load_options", "EXTENSION_KEY"]
