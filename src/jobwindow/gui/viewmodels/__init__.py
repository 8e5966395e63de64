from jobwindow.events.signal import ObservableProperty, Signal

from .base import BaseViewModel
from .grid_layout import GridLayout, ScrollMetrics, decide_load

__all__ = [
    "BaseViewModel",
    "GridLayout",
    "ObservableProperty",
    "ScrollMetrics",
    "Signal",
    "decide_load",
]
