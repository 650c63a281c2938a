"""Per-axis customizers and the fixed order the generator runs them in.

Later customizers may overwrite files written by earlier ones (component
library over styling), so the order is part of the contract.  The toast
axis has no customizer; it only shows up in the README.
"""

from .base import Customizer, CustomizerContext
from .data_fetching import DataFetchingCustomizer
from .forms import FormsCustomizer
from .icons import IconsCustomizer
from .router import RouterCustomizer
from .server_state import ServerStateCustomizer
from .state import StateCustomizer
from .styling import StylingCustomizer
from .ui_library import UILibraryCustomizer


def default_customizers() -> list[Customizer]:
    """Return one customizer per wired axis, in execution order."""
    return [
        RouterCustomizer(),
        StylingCustomizer(),
        UILibraryCustomizer(),
        StateCustomizer(),
        IconsCustomizer(),
        ServerStateCustomizer(),
        DataFetchingCustomizer(),
        FormsCustomizer(),
    ]


__all__ = [
    "Customizer",
    "CustomizerContext",
    "DataFetchingCustomizer",
    "FormsCustomizer",
    "IconsCustomizer",
    "RouterCustomizer",
    "ServerStateCustomizer",
    "StateCustomizer",
    "StylingCustomizer",
    "UILibraryCustomizer",
    "default_customizers",
]
