"""chartprep: tabular-to-chart-shape reshaping engine.

Public API:
 - reshape / try_reshape: raw rows + variable catalog + role mapping -> chart records + axis info
 - build_envelope: records -> renderer envelope (metadata, colours, axis labels)
 - ReshapeDispatcher: size-based in-process vs worker-thread placement
"""

from .charting import (  # noqa: F401
    build_envelope,
    chart_registry,
    create_fit_functions,
    generate_axis_info,
    generate_colors,
    register_chart_plugin,
    register_chart_type,
)
from .errors import (  # noqa: F401
    ChartPrepError,
    ConfigurationError,
    DispatchTimeoutError,
    ErrorKind,
    ReshapeCancelledError,
    UnsupportedChartTypeError,
    ValidationError,
    VariableLookupError,
)
from .models import ProcessingOptions, ReshapeResult, Result, RoleMapping, VariableDescriptor  # noqa: F401
from .services.chart_service import (  # noqa: F401
    build_result_record,
    create_multiple_charts,
    create_scatter_plot_with_multiple_fit_line,
    quick_chart,
)
from .services.dispatch_service import DispatchConfig, ReshapeDispatcher  # noqa: F401
from .services.reshape_service import reshape, try_reshape  # noqa: F401

__version__ = "0.1.0"
