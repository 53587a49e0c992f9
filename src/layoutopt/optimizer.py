from __future__ import annotations

import logging
from typing import Iterable, List, Union

from .errors import LayoutInvariantError
from .layout import FieldLike, compute_layout, prepare_fields
from .models import Architecture, FieldSpec, OptimizationResult
from .type_table import TYPE_SIZES, parse_architecture

logger = logging.getLogger(__name__)

# Sort key used for fields whose type is not in the table.
_UNKNOWN = (1, 1)


def optimized_order(fields: Iterable[FieldLike], arch: Union[Architecture, str]) -> List[FieldSpec]:
    """Return fields ordered by descending alignment, then descending size.

    The sort is stable, so fields with equal (alignment, size) keep their
    relative order.
    """
    table = TYPE_SIZES[parse_architecture(arch)]

    def key(spec: FieldSpec):
        size, align = table.get(spec.type_name, _UNKNOWN)
        return (-align, -size)

    return sorted(prepare_fields(fields), key=key)


def optimize(
    fields: Iterable[FieldLike],
    arch: Union[Architecture, str],
    strict: bool = False,
) -> OptimizationResult:
    prepared = prepare_fields(fields)
    original = compute_layout(prepared, arch, strict=strict)
    optimized = compute_layout(optimized_order(prepared, arch), arch, strict=strict)

    saved = original.total_size - optimized.total_size
    if saved < 0:
        raise LayoutInvariantError(
            f"reordering grew the struct from {original.total_size} to {optimized.total_size} bytes"
        )
    logger.debug(
        "Optimized %d fields: %d -> %d bytes", len(prepared), original.total_size, optimized.total_size
    )
    return OptimizationResult(
        original=original,
        optimized=optimized,
        bytes_saved=saved,
        reordered_fields=optimized.field_names,
    )
