"""Estimator state container.

EstimatorState is an immutable snapshot of everything the page shows:
current parameters, last result, last error and the loading flag.  The
module-level functions are pure transitions; EstimatorSession owns the
current snapshot and drives the single asynchronous estimate call.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Optional

from backend.services.estimate.constants import INITIAL_PARAMS
from backend.services.estimate.requester import EstimateRequester, EstimateUnavailableError
from backend.services.estimate.types import EstimationResult, ProductionParams

logger = logging.getLogger("visionary.estimate.state")


class RequestInFlightError(Exception):
    """A new estimate was requested while another one is still outstanding."""


@dataclass(frozen=True)
class EstimatorState:
    params: ProductionParams = INITIAL_PARAMS
    result: Optional[EstimationResult] = None
    error: Optional[str] = None
    loading: bool = False


# ── transitions ───────────────────────────────────────────────────────────────


def with_params(state: EstimatorState, params: ProductionParams) -> EstimatorState:
    return dataclasses.replace(state, params=params)


def with_param(state: EstimatorState, field: str, value: Any) -> EstimatorState:
    """Return a state whose params differ from ``state`` in one field."""
    return with_params(state, dataclasses.replace(state.params, **{field: value}))


def begin_request(state: EstimatorState) -> EstimatorState:
    return dataclasses.replace(state, loading=True, error=None)


def with_result(state: EstimatorState, result: EstimationResult) -> EstimatorState:
    return dataclasses.replace(state, result=result)


def with_error(state: EstimatorState, message: str) -> EstimatorState:
    # The previous result is kept on purpose; see DESIGN.md.
    return dataclasses.replace(state, error=message)


def finish_request(state: EstimatorState) -> EstimatorState:
    return dataclasses.replace(state, loading=False)


# ── session ───────────────────────────────────────────────────────────────────


class EstimatorSession:
    """Holds the current EstimatorState and gates the estimate trigger.

    Usage::

        session = EstimatorSession(EstimateRequester(api_key=key))
        session.update_param("length_seconds", 90)
        result = await session.calculate()
    """

    def __init__(
        self,
        requester: EstimateRequester,
        initial_params: ProductionParams = INITIAL_PARAMS,
    ):
        self._requester = requester
        self._state = EstimatorState(params=initial_params)

    @property
    def state(self) -> EstimatorState:
        return self._state

    @property
    def params(self) -> ProductionParams:
        return self._state.params

    def update_params(self, params: ProductionParams) -> EstimatorState:
        self._state = with_params(self._state, params)
        return self._state

    def update_param(self, field: str, value: Any) -> EstimatorState:
        """Replace a single parameter field.

        Raises:
            TypeError: If ``field`` is not a ProductionParams field.
        """
        self._state = with_param(self._state, field, value)
        return self._state

    async def calculate(self, params: Optional[ProductionParams] = None) -> EstimationResult:
        """Request an estimate, optionally replacing the parameters first.

        ``params`` is stored only once the request is accepted. The loading
        flag is set before the call is issued and cleared on every exit path.

        Raises:
            RequestInFlightError: If a previous call has not settled yet.
                Neither the parameters nor the state are touched.
            EstimateUnavailableError: If the estimate could not be retrieved.
                The error message is also stored on the state.
        """
        if self._state.loading:
            raise RequestInFlightError("An estimate request is already in progress.")

        if params is not None:
            self._state = with_params(self._state, params)
        params = self._state.params
        self._state = begin_request(self._state)
        try:
            result = await self._requester.request_estimate(params)
        except EstimateUnavailableError as exc:
            logger.info("Estimate unavailable; keeping previous result on screen")
            self._state = with_error(self._state, str(exc))
            raise
        else:
            self._state = with_result(self._state, result)
        finally:
            self._state = finish_request(self._state)
        return result
