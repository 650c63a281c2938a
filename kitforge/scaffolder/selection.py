"""Selection model: one immutable value per configurable technology axis.

Each axis is a closed ``str`` enum.  ``NONE`` is a legal value on every
optional axis and makes the matching customizer a no-op.  A handful of
legacy tokens sent by the existing web form are normalised before
validation so old clients keep working.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kitforge.errors import ConfigurationError


class Language(str, Enum):
    JS = "js"
    TS = "ts"

    @property
    def script_ext(self) -> str:
        """Extension for plain modules (``js``/``ts``)."""
        return self.value

    @property
    def component_ext(self) -> str:
        """Extension for modules containing JSX (``jsx``/``tsx``)."""
        return f"{self.value}x"


class Router(str, Enum):
    DEFAULT = "default"
    REACT_ROUTER = "react-router"
    NONE = "none"


class Styling(str, Enum):
    TAILWIND = "tailwindcss"
    STYLED_COMPONENTS = "styled-components"
    NONE = "none"


class UILibrary(str, Enum):
    SHADCN = "shadcn"
    NONE = "none"


class IconLibrary(str, Enum):
    REACT_ICONS = "react-icon"
    LUCIDE = "lucide"
    NONE = "none"


class StateManagement(str, Enum):
    REDUX = "redux"
    ZUSTAND = "zustand"
    NONE = "none"


class ServerState(str, Enum):
    TANSTACK_QUERY = "tanstack-query"
    SWR = "swr"
    NONE = "none"


class DataFetching(str, Enum):
    AXIOS = "axios"
    FETCH = "fetch"
    NONE = "none"


class FormManagement(str, Enum):
    REACT_HOOK_FORM = "react-hook-form"
    FORMIK = "formik"
    NONE = "none"


class ToastLibrary(str, Enum):
    REACT_TOASTIFY = "react-toastify"
    SONNER = "sonner"
    NONE = "none"


# Tokens the hosted form has historically sent, mapped to their canonical value.
_LEGACY_TOKENS: dict[str, str] = {
    "tanstack-qwery": "tanstack-query",
    "Styled-components": "styled-components",
    "React-router": "react-router",
}

# Axis field -> human label, in the order the README lists them.
AXIS_LABELS: dict[str, str] = {
    "lang": "Language",
    "router": "Router",
    "styling": "Styling",
    "ui_library": "UI Library",
    "state_management": "State Management",
    "icon_library": "Icons",
    "server_state": "Server State",
    "data_fetching": "Data Fetching",
    "form_management": "Form Management",
    "toast_library": "Toast Library",
}

_PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,213}$")


class Selection(BaseModel):
    """The full set of one-value-per-axis choices for a generation request."""

    model_config = ConfigDict(frozen=True)

    lang: Language = Language.JS
    router: Router = Router.DEFAULT
    styling: Styling = Styling.NONE
    ui_library: UILibrary = UILibrary.NONE
    icon_library: IconLibrary = IconLibrary.NONE
    state_management: StateManagement = StateManagement.NONE
    server_state: ServerState = ServerState.NONE
    data_fetching: DataFetching = DataFetching.NONE
    form_management: FormManagement = FormManagement.NONE
    toast_library: ToastLibrary = ToastLibrary.NONE

    @field_validator("*", mode="before")
    @classmethod
    def _normalise_legacy(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return _LEGACY_TOKENS.get(value, value)
        return value

    @property
    def uses_react_router(self) -> bool:
        return self.router in (Router.DEFAULT, Router.REACT_ROUTER)

    def resolved(self) -> dict[str, str]:
        """Return ``{axis label: chosen value}`` in README order."""
        resolved: dict[str, str] = {}
        for field_name, label in AXIS_LABELS.items():
            value = getattr(self, field_name).value
            if field_name == "router" and self.uses_react_router:
                value = "react-router"
            resolved[label] = value
        return resolved


class GenerateRequest(BaseModel):
    """Inbound generation request: a project name plus one value per axis.

    Extra keys (``data_validation`` from the hosted form, for example) are
    ignored.
    """

    model_config = ConfigDict(extra="ignore")

    app_name: str = Field(..., description="Project name, also used for the archive file name")
    lang: str = Language.JS.value
    router: str = Router.DEFAULT.value
    styling: str = Styling.NONE.value
    ui_library: str = UILibrary.NONE.value
    icon_library: str = IconLibrary.NONE.value
    state_management: str = StateManagement.NONE.value
    server_state: str = ServerState.NONE.value
    data_fetching: str = DataFetching.NONE.value
    form_management: str = FormManagement.NONE.value
    toast_library: str = ToastLibrary.NONE.value

    @property
    def project_name(self) -> str:
        return validate_project_name(self.app_name)

    def to_selection(self) -> Selection:
        return build_selection(self.model_dump(exclude={"app_name"}))


def validate_project_name(name: str) -> str:
    """Return *name* stripped, or raise ``ConfigurationError``."""
    cleaned = name.strip()
    if not _PROJECT_NAME_RE.match(cleaned):
        raise ConfigurationError(
            f"Invalid project name {name!r}: use letters, digits, '.', '_' or '-' "
            "and start with a letter or digit"
        )
    return cleaned


def build_selection(data: dict[str, Any]) -> Selection:
    """Validate raw axis values into a ``Selection``.

    Raises:
        ConfigurationError: If any axis value is outside its option set.
    """
    try:
        return Selection.model_validate(data)
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            axis = ".".join(str(part) for part in error.get("loc", ())) or "selection"
            problems.append(f"{axis}: {error.get('msg', 'invalid value')}")
        raise ConfigurationError("Invalid selection: " + "; ".join(problems)) from exc


def axis_options() -> dict[str, list[str]]:
    """Return every axis field with its legal option values."""
    fields = Selection.model_fields
    return {
        name: [member.value for member in fields[name].annotation]
        for name in AXIS_LABELS
    }
