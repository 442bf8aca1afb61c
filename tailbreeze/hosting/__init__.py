"""
Hosting integration: supervisor, request serving, link tags and the Flask
extension.
"""

from tailbreeze.hosting.environment import (
    HostEnvironment,
    RuntimeSettings,
    provisioner_from_options,
    resolve_settings,
)
from tailbreeze.hosting.serving import ServeResult, ServingLayer
from tailbreeze.hosting.supervisor import Supervisor, SupervisorState
from tailbreeze.hosting.tags import render_link_tag
from tailbreeze.hosting.flask import Tailbreeze

__all__ = [
    "HostEnvironment",
    "RuntimeSettings",
    "provisioner_from_options",
    "resolve_settings",
    "ServeResult",
    "ServingLayer",
    "Supervisor",
    "SupervisorState",
    "render_link_tag",
    "Tailbreeze",
]
