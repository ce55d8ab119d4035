"""
Boundary validation of report bundles.

Report payloads come from external reporting endpoints and carry no shape
guarantee. :func:`validate_bundle` coerces a raw bundle into a
:class:`ValidatedBundle` once, at the boundary, so the section builder works
against concrete records instead of repeating defensive checks.

Functions
---------
validate_payload(kind, payload)
    Coerce one report payload into a :class:`ReportPayload`, or None when absent.
validate_bundle(bundle)
    Coerce a full report bundle into a :class:`ValidatedBundle`.

Classes
-------
ReportPayload
    Summary mapping and list-shaped fields of one report kind.
ValidatedBundle
    Present report payloads in fixed kind order.

Notes
-----
- A kind is present when its payload is a mapping; ``None`` and any other
  shape count as absent.
- Unknown kinds are ignored.
- List fields pass through ``to_safe_list`` and every element through
  ``to_safe_mapping``, so a malformed element becomes an empty record and
  still yields a row.
- The overview report has no ``summary`` sub-object: its figures live at the
  payload root, which is used as its summary.

Examples
--------
>>> from docexport.reports.schema import validate_bundle
>>> validated = validate_bundle({"sales": {"summary": {}, "topItems": "oops"}})
>>> validated.kinds
('sales',)
>>> validated.get("sales").records("topItems")
[]
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Mapping

from .._utils import read_config
from ..normalization import to_safe_list, to_safe_mapping

logger = logging.getLogger(__name__)

REPORT_KINDS = (
    "overview",
    "sales",
    "purchases",
    "inventory",
    "customers",
    "suppliers",
    "financial",
)

LIST_FIELDS = {
    "overview": (),
    "sales": ("topItems", "topCustomers", "recentOrders", "chartData"),
    "purchases": ("topSuppliers", "recentOrders", "chartData"),
    "inventory": ("items",),
    "customers": ("customers",),
    "suppliers": ("suppliers",),
    "financial": ("salesData", "purchasesData"),
}


@dataclass(frozen=True)
class ReportPayload:
    """
    Validated payload of one report kind.

    Attributes
    ----------
    kind : str
        Report kind, one of ``REPORT_KINDS``.
    summary : Mapping or None
        Summary figures, or None when the payload has no summary object.
    lists : dict[str, list[Mapping]]
        Every list field declared for the kind, always present, each element
        a mapping.
    """

    kind: str
    summary: Mapping[str, Any] | None
    lists: dict[str, list[Mapping[str, Any]]] = field(default_factory=dict)

    def records(self, name: str) -> list[Mapping[str, Any]]:
        return self.lists.get(name, [])


@dataclass(frozen=True)
class ValidatedBundle:
    """Present report payloads, ordered by ``REPORT_KINDS``."""

    payloads: tuple[ReportPayload, ...] = ()

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(payload.kind for payload in self.payloads)

    def get(self, kind: str) -> ReportPayload | None:
        for payload in self.payloads:
            if payload.kind == kind:
                return payload
        return None


def validate_payload(kind: str, payload) -> ReportPayload | None:
    """
    Coerce a raw payload of ``kind`` into a :class:`ReportPayload`.

    Returns None when the payload is absent or not a mapping.
    """
    if not isinstance(payload, Mapping):
        if payload is not None:
            logger.debug(
                "Ignoring '%s' payload of type %s", kind, type(payload).__name__
            )
        return None
    if kind == "overview":
        summary = payload
    else:
        summary = payload.get("summary")
        summary = summary if isinstance(summary, Mapping) else None
    lists = {
        name: [to_safe_mapping(element) for element in to_safe_list(payload.get(name))]
        for name in LIST_FIELDS[kind]
    }
    return ReportPayload(kind=kind, summary=summary, lists=lists)


def validate_bundle(bundle) -> ValidatedBundle:
    """
    Coerce a raw report bundle into a :class:`ValidatedBundle`.

    Parameters
    ----------
    bundle : Mapping[str, Any] or ValidatedBundle
        Mapping from report kind to payload. Already validated bundles are
        returned unchanged.

    Returns
    -------
    ValidatedBundle
        Present payloads in fixed kind order.

    Warns
    -----
    UserWarning
        If ``bundle`` is neither a mapping nor None; an empty bundle is used.
    """
    if isinstance(bundle, ValidatedBundle):
        return bundle
    if bundle is None:
        return ValidatedBundle()
    if not isinstance(bundle, Mapping):
        wmsg = read_config("messages")["warnings"]["bundle_not_mapping_f"].format(
            type(bundle).__name__
        )
        warnings.warn(wmsg)
        logger.warning(wmsg)
        return ValidatedBundle()
    unknown = sorted(str(key) for key in bundle if key not in REPORT_KINDS)
    if unknown:
        logger.debug("Ignoring unknown report kinds: %s", unknown)
    payloads = []
    for kind in REPORT_KINDS:
        payload = validate_payload(kind, bundle.get(kind))
        if payload is not None:
            payloads.append(payload)
    return ValidatedBundle(payloads=tuple(payloads))
