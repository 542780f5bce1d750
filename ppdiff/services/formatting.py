from io import StringIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ppdiff.models.profile import ProfileComparison


def format_signed(value: float) -> str:
    """One decimal with an explicit sign; a zero change renders as '-'."""
    rounded = round(value, 1)
    if rounded == 0:
        return "-"
    return f"{rounded:+.1f}"


def format_shift(shift: int) -> str:
    if shift == 0:
        return "-"
    return f"{shift:+d}"


def build_table(comparison: ProfileComparison) -> Table:
    table = Table(box=None, pad_edge=False)
    table.add_column("beatmap")
    table.add_column("mods")
    table.add_column("live pp", justify="right")
    table.add_column("local pp", justify="right")
    table.add_column("pp change", justify="right")
    table.add_column("position change", justify="center")

    for play in comparison.plays:
        table.add_row(
            Text(f"{play.beatmap_id} - {play.beatmap_name}"),
            play.mods,
            f"{play.live_pp:.1f}",
            f"{play.local_pp:.1f}",
            f"{play.pp_change:.1f}",
            format_shift(play.rank_shift),
        )
    return table


def render_comparison(comparison: ProfileComparison, width: int = 160) -> str:
    """Render the summary lines and the per-play table as plain text."""
    totals = comparison.totals
    buffer = StringIO()
    # Beatmap names carry [difficulty] brackets; keep them out of markup parsing
    console = Console(file=buffer, width=width, color_system=None, highlight=False, markup=False, emoji=False)

    console.print(f"User:     {comparison.username}")
    console.print(f"Live PP:  {totals.reference_total:.1f} (including {totals.bonus:.1f}pp from playcount)")
    console.print(f"Local PP: {totals.adjusted_local_total:.1f} ({format_signed(totals.delta)})")
    console.print(build_table(comparison))

    return buffer.getvalue()
