"""Swap named module or class attributes for spies and put them back."""

from __future__ import annotations

import dataclasses as dc
import inspect
import logging
import pkgutil
import typing as t

from .errors import InvalidArgumentError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .spy import Spy

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class _Patch:
    """Bookkeeping needed to undo a single attribute swap."""

    target: str
    owner: object
    attribute: str
    original: object
    stored: object
    was_local: bool


def _resolve_owner(target: str) -> tuple[object, str]:
    """Split *target* into the object holding the attribute and its name."""
    owner_path, _, attribute = target.rpartition(".")
    if not owner_path or not attribute:
        msg = f"Cannot intercept {target!r}: expected a dotted 'module.attribute' path"
        raise InvalidArgumentError(msg)
    try:
        owner = pkgutil.resolve_name(owner_path)
    except (ImportError, AttributeError, ValueError) as exc:
        msg = f"Cannot intercept {target!r}: {owner_path!r} could not be resolved"
        raise InvalidArgumentError(msg) from exc
    if not hasattr(owner, attribute):
        msg = f"Cannot intercept {target!r}: {owner_path!r} has no {attribute!r}"
        raise InvalidArgumentError(msg)
    return owner, attribute


class AttributeInterceptor:
    """Replace attributes such as ``"os.path.exists"`` with spies.

    Every swap is remembered so :meth:`restore_all` can put the original
    objects back, newest first. Installing the same target twice only
    replaces the spy; the original recorded on the first install is kept.
    """

    def __init__(self) -> None:
        self._patches: dict[str, _Patch] = {}

    def __contains__(self, target: object) -> bool:
        return target in self._patches

    @property
    def targets(self) -> list[str]:
        """Return the currently intercepted targets in install order."""
        return list(self._patches)

    def install(self, target: str, spy: Spy) -> Spy:
        """Route calls to *target* through *spy* and return the spy."""
        existing = self._patches.get(target)
        if existing is not None:
            setattr(existing.owner, existing.attribute, spy)
            return spy
        owner, attribute = _resolve_owner(target)
        owner_dict = getattr(owner, "__dict__", {})
        patch = _Patch(
            target=target,
            owner=owner,
            attribute=attribute,
            original=getattr(owner, attribute),
            stored=inspect.getattr_static(owner, attribute),
            was_local=attribute in owner_dict,
        )
        setattr(owner, attribute, spy)
        self._patches[target] = patch
        logger.debug("Intercepted %s with %r", target, spy)
        return spy

    def original(self, target: str) -> object:
        """Return the object *target* referred to before interception."""
        try:
            return self._patches[target].original
        except KeyError:
            msg = f"{target!r} is not intercepted"
            raise InvalidArgumentError(msg) from None

    def restore_all(self) -> None:
        """Undo every swap, newest first."""
        for target in reversed(list(self._patches)):
            patch = self._patches.pop(target)
            if patch.was_local:
                setattr(patch.owner, patch.attribute, patch.stored)
            else:
                delattr(patch.owner, patch.attribute)
            logger.debug("Restored %s", target)


__all__ = ["AttributeInterceptor"]
