"""Host-side controller: selection state, panel messages, previews."""

from .controller import PluginController, PluginHost
from .preview import Exporter, build_preview

__all__ = ["Exporter", "PluginController", "PluginHost", "build_preview"]
