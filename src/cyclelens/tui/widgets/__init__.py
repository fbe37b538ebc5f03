"""Widgets for the cyclelens editor."""

from cyclelens.tui.widgets.annotation_gutter import AnnotationGutter
from cyclelens.tui.widgets.toggle_lens import ToggleLens
from cyclelens.tui.widgets.totals_bar import TotalsBar

__all__ = ["AnnotationGutter", "ToggleLens", "TotalsBar"]
