"""Terminal rendering of the results view."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .controller import AppState
from .models import AnalysisResult

ACCENT = "#C2B8A3"
MUTED = "grey50"

SKILL_SECTIONS = (
    ("Languages", "languages"),
    ("Frameworks", "frameworks"),
    ("Databases", "databases"),
    ("Other", "other"),
)


class ResultsRenderer:
    """Projects AppState onto a rich console. Tolerates an empty result."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def __call__(self, state: AppState) -> None:
        self.render(state)

    def render(self, state: AppState) -> None:
        result = state.last_result
        if result is None:
            self.console.print(
                Panel(
                    "No analysis yet. Upload a resume to see its critique here.",
                    title="Results",
                    border_style=MUTED,
                )
            )
            return

        self.console.print(self._header(state.selected_role, result))
        self.console.print(Panel(Text(result.overview), title="Overview", border_style=MUTED))
        self.console.print(self._bullets("Strengths", result.strengths, "●"))

        skills = self._skills(result)
        if skills is not None:
            self.console.print(skills)

        if result.missing:
            self.console.print(self._missing(result))
        for index, imp in enumerate(result.improvements, start=1):
            self.console.print(self._improvement(index, imp.recommendation, imp.reason, imp.action))

        alignment = result.role_alignment
        self.console.print(
            Panel(
                Group(
                    Text(f"Match level: {alignment.match_level}", style=f"bold {ACCENT}"),
                    *[Text(f"- {gap}") for gap in alignment.gaps],
                    *[Text(f"+ {sug}") for sug in alignment.suggestions],
                ),
                title="Role Alignment",
                border_style=MUTED,
            )
        )

        plan = Group(*[Text(f"{i}. {step}") for i, step in enumerate(result.action_plan, start=1)])
        self.console.print(Panel(plan, title="Action Plan", border_style=ACCENT))

    def render_error(self, message: str) -> None:
        self.console.print(f"ERROR: {message}", style="bold red", markup=False)

    def _header(self, role: str, result: AnalysisResult) -> Panel:
        header = Text()
        header.append(f"{result.score}", style=f"bold {ACCENT}")
        header.append("/100  ", style=MUTED)
        header.append(role or "-", style="bold")
        header.append(f"  ({result.role_alignment.match_level} match)", style=MUTED)
        return Panel(header, title="Resume Score", border_style=ACCENT)

    def _bullets(self, title: str, items: List[str], marker: str) -> Panel:
        body = Group(*[Text(f"{marker} {item}") for item in items]) if items else Text("None", style=MUTED)
        return Panel(body, title=title, border_style=MUTED)

    def _skills(self, result: AnalysisResult) -> Optional[Panel]:
        table = Table.grid(padding=(0, 2))
        table.add_column(style=MUTED)
        table.add_column()
        rows = 0
        for title, key in SKILL_SECTIONS:
            skills = getattr(result.skills, key)
            if not skills:
                continue
            table.add_row(title.upper(), Text(", ".join(skills)))
            rows += 1
        if not rows:
            return None
        return Panel(table, title="Skills", border_style=MUTED)

    def _missing(self, result: AnalysisResult) -> Panel:
        table = Table(show_header=True, header_style=MUTED, box=None)
        table.add_column("Section")
        table.add_column("Why it matters")
        for item in result.missing:
            table.add_row(Text(item.name), Text(item.importance))
        return Panel(table, title="Missing", border_style=MUTED)

    def _improvement(self, index: int, recommendation: str, reason: str, action: str) -> Panel:
        table = Table.grid(padding=(0, 2))
        table.add_column(style=MUTED)
        table.add_column()
        table.add_row("WHY", Text(reason))
        table.add_row("ACT", Text(action))
        title = Text(f"IMP {index}: {recommendation}")
        return Panel(table, title=title, title_align="left", border_style=MUTED)
