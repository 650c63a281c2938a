"""README sections appended to the generated project.

Two sections are appended to the base template's ``README.md``:
"Dependencies" documents every library the selection pulled in, and
"Customizations" lists the resolved value of each axis, including the toast
axis, which has no customizer.
"""

from __future__ import annotations

from .selection import (
    DataFetching,
    FormManagement,
    IconLibrary,
    Selection,
    ServerState,
    StateManagement,
    Styling,
    UILibrary,
)

# (heading, [(title, url, blurb), ...])
DocEntry = tuple[str, list[tuple[str, str, str]]]

_CORE: DocEntry = ("Core", [
    ("React", "https://react.dev/", "A JavaScript library for building user interfaces"),
    ("React DOM", "https://react.dev/reference/react-dom", "React package for working with the DOM"),
])

_ROUTING: DocEntry = ("Routing", [
    ("React Router", "https://reactrouter.com/", "Declarative routing for React applications"),
])

_STYLING: dict[Styling, DocEntry] = {
    Styling.TAILWIND: ("Styling", [
        ("Tailwind CSS", "https://tailwindcss.com/", "A utility-first CSS framework"),
    ]),
    Styling.STYLED_COMPONENTS: ("Styling", [
        ("Styled Components", "https://styled-components.com/", "Visual primitives for the component age"),
    ]),
}

_UI: dict[UILibrary, DocEntry] = {
    UILibrary.SHADCN: ("UI Components", [
        ("shadcn/ui", "https://ui.shadcn.com/", "Re-usable components built with Radix UI and Tailwind CSS"),
    ]),
}

_STATE: dict[StateManagement, DocEntry] = {
    StateManagement.REDUX: ("State Management", [
        ("Redux Toolkit", "https://redux-toolkit.js.org/", "The official, opinionated toolset for Redux development"),
        ("React Redux", "https://react-redux.js.org/", "Official React bindings for Redux"),
    ]),
    StateManagement.ZUSTAND: ("State Management", [
        ("Zustand", "https://zustand-demo.pmnd.rs/", "A small, fast, and scalable state management solution"),
    ]),
}

_ICONS: dict[IconLibrary, DocEntry] = {
    IconLibrary.REACT_ICONS: ("Icons", [
        ("React Icons", "https://react-icons.github.io/react-icons/", "Popular icons in one package"),
    ]),
    IconLibrary.LUCIDE: ("Icons", [
        ("Lucide React", "https://lucide.dev/", "Beautiful & consistent icons"),
    ]),
}

_SERVER_STATE: dict[ServerState, DocEntry] = {
    ServerState.TANSTACK_QUERY: ("Server State Management", [
        ("TanStack Query", "https://tanstack.com/query/latest", "Powerful asynchronous state management"),
    ]),
    ServerState.SWR: ("Server State Management", [
        ("SWR", "https://swr.vercel.app/", "React Hooks for Data Fetching"),
    ]),
}

_DATA_FETCHING: dict[DataFetching, DocEntry] = {
    DataFetching.AXIOS: ("Data Fetching", [
        ("Axios", "https://axios-http.com/", "Promise based HTTP client"),
    ]),
}

_FORMS: dict[FormManagement, DocEntry] = {
    FormManagement.REACT_HOOK_FORM: ("Form Management", [
        ("React Hook Form", "https://react-hook-form.com/", "Performant, flexible and extensible forms"),
    ]),
    FormManagement.FORMIK: ("Form Management", [
        ("Formik", "https://formik.org/", "Build forms in React without tears"),
    ]),
}


def _doc_entries(selection: Selection) -> list[DocEntry]:
    entries = [_CORE]
    if selection.uses_react_router:
        entries.append(_ROUTING)
    for table, value in (
        (_STYLING, selection.styling),
        (_UI, selection.ui_library),
        (_STATE, selection.state_management),
        (_ICONS, selection.icon_library),
        (_SERVER_STATE, selection.server_state),
        (_DATA_FETCHING, selection.data_fetching),
        (_FORMS, selection.form_management),
    ):
        entry = table.get(value)
        if entry is not None:
            entries.append(entry)
    return entries


def render_readme_sections(selection: Selection) -> str:
    """Return the Markdown appended to the project's ``README.md``.

    The project name is deliberately absent so two runs with the same
    selection produce the same README.
    """
    lines: list[str] = ["", "## Dependencies", ""]
    for heading, libraries in _doc_entries(selection):
        lines.append(f"### {heading}")
        for title, url, blurb in libraries:
            lines.append(f"- [{title}]({url}) - {blurb}")
        lines.append("")

    lines.extend([
        "## Getting Started",
        "",
        "```bash",
        "npm install",
        "npm run dev",
        "```",
        "",
        "## Customizations",
        "",
    ])
    for label, value in selection.resolved().items():
        lines.append(f"- {label}: {value}")
    lines.append("")

    return "\n".join(lines)
