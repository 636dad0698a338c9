"""Reshaping strategy registry.

Maps chart-type identifiers to tagged reshaping strategies. Each entry knows
its algorithm family, aggregation policy and colour rule, so dispatch, axis
info and colour assignment all consult the same table.

Extension points:
 - ``register_chart_type`` for built-in strategies (module import time)
 - ``register_chart_plugin`` for third-party bundles; a plugin whose
   ``register`` callback fails leaves no chart types behind
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from ..errors import UnsupportedChartTypeError
from .aggregation import ALL_MODES, AggregationPolicy
from .types import ChartFamily, ColorRule, ReshapeContext, ReshapeStrategy

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartType:
    """Registered chart type: strategy plus the tags derived behaviour keys on.

    Attributes:
        chart_type: Identifier used by callers (e.g. 'Clustered Bar Chart').
        strategy: Callable turning a ReshapeContext into records.
        family: Algorithm family; selects axis info and default axis labels.
        aggregation: Allowed / default aggregation modes.
        colors: Colour assignment rule.
        color_field: Record field counted by the 'categories' colour rule.
        plugin_id / plugin_version: Set for plugin-contributed types.
    """

    chart_type: str
    strategy: ReshapeStrategy
    description: str
    family: ChartFamily
    aggregation: AggregationPolicy = ALL_MODES
    colors: ColorRule = ColorRule.SINGLE
    color_field: str = "category"
    plugin_id: Optional[str] = None
    plugin_version: Optional[str] = None
    meta: Mapping[str, Any] = field(default_factory=dict)


class ChartPluginProtocol(Protocol):  # pragma: no cover - structural only
    """A bundle of chart types; ``register`` receives a ChartRegistrar."""

    id: str
    version: str

    def register(self, registrar: "ChartRegistrar") -> None:  # noqa: D401
        ...


class ChartRegistrar:
    """Registration handle given to one plugin; tags every entry with the plugin id."""

    def __init__(self, registry: "ChartRegistry", plugin: ChartPluginProtocol) -> None:
        self._registry = registry
        self._plugin = plugin
        self.added: List[str] = []

    def register(
        self,
        chart_type: str,
        strategy: ReshapeStrategy,
        description: str,
        *,
        family: ChartFamily,
        aggregation: AggregationPolicy = ALL_MODES,
        colors: ColorRule = ColorRule.SINGLE,
        color_field: str = "category",
        **meta: Any,
    ) -> None:
        entry = ChartType(
            chart_type,
            strategy,
            description,
            family,
            aggregation=aggregation,
            colors=colors,
            color_field=color_field,
            plugin_id=self._plugin.id,
            plugin_version=self._plugin.version,
            meta=meta,
        )
        self._registry.add(entry)
        self.added.append(chart_type)


class ChartRegistry:
    def __init__(self) -> None:
        self._types: Dict[str, ChartType] = {}
        self._plugins: Dict[str, Tuple[str, Tuple[str, ...]]] = {}  # id -> (version, chart types)

    # Chart types -------------------------------------------------------
    def add(self, entry: ChartType) -> None:
        if entry.chart_type in self._types:
            raise ValueError(f"Chart type already registered: {entry.chart_type}")
        self._types[entry.chart_type] = entry

    def register(
        self,
        chart_type: str,
        strategy: ReshapeStrategy,
        description: str,
        *,
        family: ChartFamily,
        aggregation: AggregationPolicy = ALL_MODES,
        colors: ColorRule = ColorRule.SINGLE,
        color_field: str = "category",
    ) -> None:
        self.add(
            ChartType(
                chart_type,
                strategy,
                description,
                family,
                aggregation=aggregation,
                colors=colors,
                color_field=color_field,
            )
        )

    def get(self, chart_type: str) -> ChartType:
        """Entry for ``chart_type``; raises UnsupportedChartTypeError (a KeyError)."""
        try:
            return self._types[chart_type]
        except KeyError:
            raise UnsupportedChartTypeError(
                f"Unsupported chart type: {chart_type}", context={"chart_type": chart_type}
            ) from None

    def find(self, chart_type: str) -> Optional[ChartType]:
        return self._types.get(chart_type)

    def __contains__(self, chart_type: object) -> bool:
        return chart_type in self._types

    def reshape(self, ctx: ReshapeContext) -> List[Any]:
        entry = self.get(ctx.chart_type)
        t0 = perf_counter()
        records = entry.strategy(ctx)
        log.debug(
            "reshaped %s (%s, aggregation=%s): %d rows -> %d records in %.2f ms",
            ctx.chart_type,
            entry.family.value,
            ctx.aggregation,
            len(ctx.rows),
            len(records),
            (perf_counter() - t0) * 1000.0,
        )
        return records

    # Introspection -----------------------------------------------------
    def list_types(self) -> Dict[str, str]:
        return {name: entry.description for name, entry in self._types.items()}

    def list_types_by_family(self, family: ChartFamily) -> List[str]:
        return [name for name, entry in self._types.items() if entry.family is family]

    def list_types_by_plugin(self, plugin_id: str) -> Dict[str, str]:
        _, names = self._plugins.get(plugin_id, ("", ()))
        return {name: self._types[name].description for name in names}

    def aggregation_table(self) -> Dict[str, Tuple[str, ...]]:
        """Chart type -> allowed aggregation modes."""
        return {name: entry.aggregation.allowed for name, entry in self._types.items()}

    # Plugins -----------------------------------------------------------
    def register_plugin(self, plugin: ChartPluginProtocol) -> None:
        if plugin.id in self._plugins:
            raise ValueError(f"Plugin already registered: {plugin.id}")
        registrar = ChartRegistrar(self, plugin)
        try:
            plugin.register(registrar)
        except Exception:
            for name in registrar.added:
                self._types.pop(name, None)
            raise
        self._plugins[plugin.id] = (plugin.version, tuple(registrar.added))
        log.debug("chart plugin %s %s added %d chart types", plugin.id, plugin.version, len(registrar.added))

    def list_plugins(self) -> Dict[str, str]:
        return {plugin_id: version for plugin_id, (version, _) in self._plugins.items()}


chart_registry = ChartRegistry()


def register_chart_type(
    chart_type: str,
    strategy: ReshapeStrategy,
    description: str,
    *,
    family: ChartFamily,
    aggregation: AggregationPolicy = ALL_MODES,
    colors: ColorRule = ColorRule.SINGLE,
    color_field: str = "category",
) -> None:
    """Register a built-in (non-plugin) chart type on the global registry."""
    chart_registry.register(
        chart_type,
        strategy,
        description,
        family=family,
        aggregation=aggregation,
        colors=colors,
        color_field=color_field,
    )


def register_chart_plugin(plugin: ChartPluginProtocol) -> None:
    chart_registry.register_plugin(plugin)


__all__ = [
    "ChartType",
    "ChartPluginProtocol",
    "ChartRegistrar",
    "ChartRegistry",
    "chart_registry",
    "register_chart_type",
    "register_chart_plugin",
]
