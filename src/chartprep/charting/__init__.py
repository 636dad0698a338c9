"""Chart reshaping layer

Holds the strategy registry plus everything derived from a chart type:
reshaping strategies (grouped per algorithm family), axis info, colour
assignment and the renderer envelope.

Importing this package registers every built-in chart type on
``chart_registry``; third-party chart types come in through
``register_chart_plugin``.
"""

from .registry import chart_registry, register_chart_type, register_chart_plugin  # noqa: F401
from .types import CancelToken, ChartFamily, ColorRule, ReshapeContext  # noqa: F401
from . import category_charts  # noqa: F401  # registers simple, stacked and error-bar chart types
from . import scatter_charts  # noqa: F401  # registers scatter, dual-axis and matrix chart types
from . import threed_charts  # noqa: F401  # registers 3D chart types
from . import range_charts  # noqa: F401  # registers range, difference area and bar & line chart types
from . import distribution_charts  # noqa: F401  # registers histogram-like chart types
from .axis_info import generate_axis_info  # noqa: F401
from .palette import generate_colors  # noqa: F401
from .envelope import build_envelope  # noqa: F401
from .fit_functions import create_fit_functions  # noqa: F401
