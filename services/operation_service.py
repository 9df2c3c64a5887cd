"""
Async operation lifecycle shared by every state slice.

A slice owns one state fragment and the reducers that mutate it. An
operation is a single-shot call against the API client that moves its
slice through three phases:

    invoked -> pending -> fulfilled   (call returned)
                       -> rejected    (call raised)

pending sets is_loading and clears error, nothing else. fulfilled applies
the operation's merge rule. rejected stores a readable message. Reducers
run on the event-loop thread and finish before the next one starts; only
the blocking HTTP call is pushed to a worker thread. Nothing is retried.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

from exceptions import ApiError, AuthenticationError, SheetChartError
from services.session_service import SESSION_EXPIRED

logger = logging.getLogger(__name__)

Reducer = Callable[[Any, "Action"], None]


@dataclass
class Action:
    type: str
    payload: Any = None
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult:
    """What the invoking view gets back once the terminal phase applied."""
    ok: bool
    payload: Any = None
    error: Optional[str] = None
    auth_failure: bool = False


@dataclass
class OperationContext:
    """Collaborators handed to every operation call."""
    api: Any
    session: Any


class ActionCreator:
    def __init__(self, action_type: str):
        self.type = action_type

    def __call__(self, payload: Any = None) -> Action:
        return Action(self.type, payload)


def _settle(state) -> None:
    state.outstanding = max(state.outstanding - 1, 0)
    state.is_loading = state.outstanding > 0


class AsyncOperation:
    def __init__(
        self,
        type_prefix: str,
        call: Callable[[OperationContext, Any], Any],
        default_error: str,
    ):
        self.type_prefix = type_prefix
        self.call = call
        self.default_error = default_error
        self.pending = f"{type_prefix}/pending"
        self.fulfilled = f"{type_prefix}/fulfilled"
        self.rejected = f"{type_prefix}/rejected"

    def error_message(self, error: Exception) -> str:
        if isinstance(error, ApiError) and error.server_message:
            return error.server_message
        return self.default_error

    async def run(self, store: "Store", arg: Any = None) -> OperationResult:
        meta = {"request_id": uuid.uuid4().hex, "arg": arg}
        store.dispatch(Action(self.pending, meta=meta))
        logger.debug(f"{self.pending} {meta['request_id']}")

        try:
            payload = await asyncio.to_thread(self.call, store.context, arg)
        except AuthenticationError:
            store.dispatch(Action(self.rejected, meta={**meta, "auth_failure": True}))
            store.dispatch(Action(SESSION_EXPIRED, meta={"source": self.type_prefix}))
            return OperationResult(ok=False, auth_failure=True)
        except SheetChartError as e:
            message = self.error_message(e)
            logger.warning(f"{self.rejected}: {e.message}")
            store.dispatch(Action(self.rejected, error=message, meta=meta))
            return OperationResult(ok=False, error=message)
        except Exception:
            logger.exception(f"{self.rejected}: unexpected error")
            store.dispatch(Action(self.rejected, error=self.default_error, meta=meta))
            return OperationResult(ok=False, error=self.default_error)

        store.dispatch(Action(self.fulfilled, payload=payload, meta=meta))
        logger.debug(f"{self.fulfilled} {meta['request_id']}")
        return OperationResult(ok=True, payload=payload)


class Slice:
    """
    Definition of a state fragment: its initial state and reducer table.
    The live state is owned by the Store, so several stores never share it.
    """

    def __init__(self, name: str, initial_state: BaseModel):
        self.name = name
        self._initial_state = initial_state
        self._reducers: Dict[str, Reducer] = {}

    def initial_state(self) -> BaseModel:
        return self._initial_state.model_copy(deep=True)

    def on(self, action_type: str, reducer: Reducer) -> None:
        self._reducers[action_type] = reducer

    def reducer(self, fn: Reducer) -> ActionCreator:
        """Register a synchronous reducer; returns its action creator."""
        action_type = f"{self.name}/{fn.__name__}"
        self.on(action_type, fn)
        return ActionCreator(action_type)

    def operation(
        self,
        name: str,
        call: Callable[[OperationContext, Any], Any],
        default_error: str,
        on_fulfilled: Optional[Reducer] = None,
    ) -> AsyncOperation:
        op = AsyncOperation(f"{self.name}/{name}", call, default_error)

        def pending(state, action: Action) -> None:
            state.outstanding += 1
            state.is_loading = True
            state.error = None

        def fulfilled(state, action: Action) -> None:
            if on_fulfilled is not None:
                on_fulfilled(state, action)
            state.error = None
            _settle(state)

        def rejected(state, action: Action) -> None:
            _settle(state)
            # auth failures are handled globally, not shown per operation
            if not action.meta.get("auth_failure"):
                state.error = action.error

        self.on(op.pending, pending)
        self.on(op.fulfilled, fulfilled)
        self.on(op.rejected, rejected)
        return op

    def reduce(self, state, action: Action) -> None:
        reducer = self._reducers.get(action.type)
        if reducer is not None:
            reducer(state, action)


Listener = Callable[[Action, "Store"], None]


class Store:
    def __init__(self, slices: List[Slice], context: OperationContext):
        self._slices = {s.name: s for s in slices}
        self._states = {s.name: s.initial_state() for s in slices}
        self._listeners: List[Listener] = []
        self.context = context

    def state(self, name: str):
        """Live state of one slice. Read it, mutate it only via dispatch."""
        return self._states[name]

    def get_state(self) -> Dict[str, BaseModel]:
        return {name: state.model_copy(deep=True) for name, state in self._states.items()}

    def dispatch(self, action: Action) -> Action:
        for name, slice_ in self._slices.items():
            slice_.reduce(self._states[name], action)
        for listener in list(self._listeners):
            listener(action, self)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def run(self, operation: AsyncOperation, arg: Any = None) -> OperationResult:
        return await operation.run(self, arg)
