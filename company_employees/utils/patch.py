"""
Partial Updates

JSON-Patch style partial updates (``add``, ``remove``, ``replace``) for
entities exposed through a pydantic transfer shape.

A patch moves through ``RECEIVED -> APPLIED -> VALIDATED`` and ends up
``ACCEPTED`` or ``REJECTED``. Operations run against a deep copy of the
entity's transfer shape, so a failing operation or a failing validation
leaves the tracked entity untouched. The merger never persists anything;
committing an accepted patch is up to the caller.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from company_employees.exceptions import EntityValidationError, PatchOperationError

logger = logging.getLogger(__name__)

E = TypeVar("E")
S = TypeVar("S", bound=BaseModel)

SUPPORTED_OPERATIONS = ("add", "remove", "replace")


class PatchOperation(BaseModel):
    op: str
    path: str
    value: Any = None

    def describe(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PatchState(str, Enum):
    RECEIVED = "received"
    APPLIED = "applied"
    VALIDATED = "validated"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PatchStateError(RuntimeError):
    """Raised when a pipeline step is called out of order."""


def parse_operations(body: Any) -> list[PatchOperation]:
    """Build operations from a decoded request body."""
    if not isinstance(body, list):
        raise PatchOperationError("Patch document must be a list of operations")
    operations = []
    for raw in body:
        try:
            operations.append(PatchOperation.model_validate(raw))
        except ValidationError as e:
            raise PatchOperationError(
                "Malformed patch operation", operation=raw if isinstance(raw, dict) else None
            ) from e
    return operations


def _split_pointer(path: str) -> list[str]:
    if not path.startswith("/"):
        raise ValueError(f"path '{path}' must start with '/'")
    return [token.replace("~1", "/").replace("~0", "~") for token in path[1:].split("/")]


def _list_index(container: list, token: str, allow_end: bool) -> int:
    if token == "-" and allow_end:
        return len(container)
    if not token.isdigit():
        raise ValueError(f"'{token}' is not a valid list index")
    index = int(token)
    upper = len(container) if allow_end else len(container) - 1
    if index > upper:
        raise ValueError(f"index {index} is out of range")
    return index


def _member_key(container: dict, token: str) -> str:
    # Members of a transfer shape match case-insensitively, like query fields.
    if token in container:
        return token
    for key in container:
        if key.lower() == token.lower():
            return key
    raise ValueError(f"target location '{token}' does not exist")


def _resolve_parent(document: Any, tokens: list[str]) -> Any:
    target = document
    for token in tokens:
        if isinstance(target, dict):
            target = target[_member_key(target, token)]
        elif isinstance(target, list):
            target = target[_list_index(target, token, allow_end=False)]
        else:
            raise ValueError(f"cannot traverse into '{token}'")
    return target


def _apply_operation(document: Any, operation: PatchOperation) -> None:
    if operation.op not in SUPPORTED_OPERATIONS:
        raise ValueError(f"unsupported operation '{operation.op}'")
    if operation.op != "remove" and "value" not in operation.model_fields_set:
        raise ValueError(f"'{operation.op}' requires a value")

    tokens = _split_pointer(operation.path)
    parent = _resolve_parent(document, tokens[:-1])
    last = tokens[-1]

    if isinstance(parent, dict):
        key = _member_key(parent, last)
        # Removing a declared member of a typed shape resets it.
        parent[key] = None if operation.op == "remove" else copy.deepcopy(operation.value)
    elif isinstance(parent, list):
        if operation.op == "add":
            parent.insert(_list_index(parent, last, allow_end=True), copy.deepcopy(operation.value))
        elif operation.op == "replace":
            parent[_list_index(parent, last, allow_end=False)] = copy.deepcopy(operation.value)
        else:
            parent.pop(_list_index(parent, last, allow_end=False))
    else:
        raise ValueError(f"path '{operation.path}' does not address a container")


def apply_patch(document: dict[str, Any], operations: Iterable[PatchOperation]) -> dict[str, Any]:
    """
    Apply operations to a copy of ``document`` and return the copy.

    Raises:
        PatchOperationError: on the first operation that cannot be applied;
            ``document`` is never modified.
    """
    patched = copy.deepcopy(document)
    for operation in operations:
        try:
            _apply_operation(patched, operation)
        except ValueError as e:
            raise PatchOperationError(
                f"The {operation.op!r} operation on '{operation.path}' failed: {e}",
                operation=operation.describe(),
            ) from e
    return patched


@dataclass
class PatchResult(Generic[S]):
    operations: list[PatchOperation]
    snapshot: dict[str, Any]
    state: PatchState = PatchState.RECEIVED
    document: dict[str, Any] | None = None
    shape: S | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    rejected_at: PatchState | None = None

    @property
    def accepted(self) -> bool:
        return self.state is PatchState.ACCEPTED

    @property
    def rejected(self) -> bool:
        return self.state is PatchState.REJECTED

    def reject(self, stage: PatchState, errors: list[dict[str, Any]]) -> None:
        self.state = PatchState.REJECTED
        self.rejected_at = stage
        self.errors = errors

    def raise_for_rejection(self) -> None:
        """Surface a rejection as the matching client error."""
        if not self.rejected:
            return
        if self.rejected_at is PatchState.APPLIED:
            first = self.errors[0] if self.errors else {}
            raise PatchOperationError(first.get("message", "Invalid patch operation"), operation=first.get("operation"))
        raise EntityValidationError("Invalid model state for the patch document", errors=self.errors)


class PatchMerger(Generic[E, S]):
    """
    Runs a patch document against one entity.

    Args:
        schema: Transfer shape the patch targets and is validated against
        to_transfer_shape: Maps the tracked entity to ``schema``
        apply_transfer_shape: Copies a validated shape onto the entity
    """

    def __init__(
        self,
        schema: type[S],
        to_transfer_shape: Callable[[E], S],
        apply_transfer_shape: Callable[[S, E], None],
    ):
        self.schema = schema
        self.to_transfer_shape = to_transfer_shape
        self.apply_transfer_shape = apply_transfer_shape

    def receive(self, entity: E, operations: Iterable[PatchOperation]) -> PatchResult[S]:
        snapshot = self.to_transfer_shape(entity).model_dump(mode="python")
        return PatchResult(operations=list(operations), snapshot=snapshot)

    def apply(self, result: PatchResult[S]) -> PatchResult[S]:
        self._expect(result, PatchState.RECEIVED)
        try:
            result.document = apply_patch(result.snapshot, result.operations)
        except PatchOperationError as e:
            logger.info(f"Rejected patch for {self.schema.__name__}: {e.message}")
            result.reject(
                PatchState.APPLIED,
                [{"message": e.message, "operation": e.details.get("operation"), "type": "patch_operation"}],
            )
            return result
        result.state = PatchState.APPLIED
        return result

    def validate(self, result: PatchResult[S]) -> PatchResult[S]:
        self._expect(result, PatchState.APPLIED)
        try:
            result.shape = self.schema.model_validate(result.document)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"], "type": error["type"]}
                for error in e.errors()
            ]
            logger.info(f"Patched {self.schema.__name__} failed validation: {errors}")
            result.reject(PatchState.VALIDATED, errors)
            return result
        result.state = PatchState.VALIDATED
        return result

    def accept(self, result: PatchResult[S], entity: E) -> PatchResult[S]:
        self._expect(result, PatchState.VALIDATED)
        self.apply_transfer_shape(result.shape, entity)
        result.state = PatchState.ACCEPTED
        return result

    def merge(self, entity: E, operations: Iterable[PatchOperation]) -> PatchResult[S]:
        """Run every step; the entity changes only if the patch is accepted."""
        result = self.apply(self.receive(entity, operations))
        if result.state is PatchState.APPLIED:
            self.validate(result)
        if result.state is PatchState.VALIDATED:
            self.accept(result, entity)
        return result

    @staticmethod
    def _expect(result: PatchResult, state: PatchState) -> None:
        if result.state is not state:
            raise PatchStateError(f"Expected a {state.value} patch, got {result.state.value}")
