from __future__ import annotations

import warnings
from enum import IntEnum
from typing import TYPE_CHECKING, List, NamedTuple

import numpy as np

from marquardt.data import validate_network_to_data
from marquardt.error import CapabilityError, UnsupportedOperationError
from marquardt.hessian import ChainRuleHessian, ThreadSettings
from marquardt.linalg import LUDecomposition

from ._error import calculate_sse

if TYPE_CHECKING:
    from marquardt.data import TrainingSet
    from marquardt.hessian import HessianEngine
    from marquardt.network import FeedForwardNetwork

__all__ = [
    "LevenbergMarquardt",
    "LMStatus",
    "LMIterationResult",
    "LMProgress",
    "SCALE_LAMBDA",
    "LAMBDA_MAX",
    "LAMBDA_INITIAL",
]


SCALE_LAMBDA = 10.0  # Factor by which the damping is increased or decreased
LAMBDA_MAX = 1e25  # Upper bound on the damping
LAMBDA_INITIAL = 0.1


class LMStatus(IntEnum):
    """How a Levenberg-Marquardt iteration ended."""

    ACCEPTED = 1  # A step reduced the error
    MAX_LAMBDA_REACHED = 2  # Damping hit its upper bound without improvement

    @property
    def message(self) -> str:
        """Get descriptive message for this status code."""
        messages = {
            LMStatus.ACCEPTED: "A step reducing the sum-squared error was accepted",
            LMStatus.MAX_LAMBDA_REACHED: (
                "The damping factor reached its maximum without reducing the "
                "error; the last attempted weights were kept"
            ),
        }
        return messages.get(self, "Unknown status")

    @property
    def success(self) -> bool:
        return self == LMStatus.ACCEPTED


class LMIterationResult(NamedTuple):
    """Outcome of a single Levenberg-Marquardt iteration.

    Attributes
    ----------
    error : float
        Sum-squared error reported for the iteration.  This is the error of the
        last candidate written to the network, or the starting error if no
        candidate could be computed.
    starting_error : float
        Sum-squared error before the iteration, as computed by the Hessian engine
    lambda_ : float
        Damping factor after the iteration
    status : LMStatus
        Termination reason
    retries : int
        Number of rejected attempts, including singular systems
    """

    error: float
    starting_error: float
    lambda_: float
    status: LMStatus
    retries: int


class LMProgress:
    """Print training progress every ``nprint`` iterations."""

    def __init__(self, nprint=0):
        self.nprint = nprint
        self.header_printed = False

    def report(self, iteration, result: LMIterationResult):
        if self.nprint <= 0 or iteration % self.nprint != 0:
            return

        if not self.header_printed:
            print(
                f"{'Iteration':^10} {'Error':^15} {'Error reduction':^15} "
                f"{'Lambda':^12} {'Retries':^8}"
            )
            self.header_printed = True

        reduction = result.starting_error - result.error
        print(
            f"{iteration:^10} {result.error:^15.4e} {reduction:^15.2e} "
            f"{result.lambda_:^12.2e} {result.retries:^8}"
        )


class LevenbergMarquardt:
    """Train a feed-forward network with the Levenberg-Marquardt algorithm.

    The algorithm interpolates between the Gauss-Newton method and gradient
    descent.  Each iteration solves the damped normal equations

        (H + lambda * I) delta = g

    where ``H`` and ``g`` are the Gauss-Newton Hessian and gradient of the
    sum-squared error supplied by a Hessian engine.  If the step ``delta``
    reduces the error it is accepted and the damping ``lambda`` is divided by
    ten, moving the next step towards Gauss-Newton.  Otherwise the damping is
    multiplied by ten, moving towards a short gradient-descent step, and the
    system is solved again.  The damping persists from one iteration to the
    next.

    If the damping exceeds ``LAMBDA_MAX`` without an improving step, it is
    clamped and the iteration ends anyway.  In that case the weights of the
    last attempted step stay installed in the network, even though they did
    not reduce the error; the previous weights are not restored.

    The method only finds a local minimum.

    Parameters
    ----------
    network : FeedForwardNetwork
        Network to train.  Its parameters are updated in place.
    training : TrainingSet
        Training data.  Every sample is used in every iteration.
    hessian : HessianEngine, optional
        Strategy used to compute the Hessian approximation.  Defaults to
        :py:class:`~marquardt.hessian.ChainRuleHessian`.
    nprint : int, optional
        Print progress every ``nprint`` iterations.  Default is 0 (silent).

    Raises
    ------
    ConfigurationError
        If the training data does not match the network's input or output
        counts, or the network is not supported by the Hessian engine.

    Examples
    --------
    >>> from marquardt.data import TrainingSet
    >>> from marquardt.network import FeedForwardNetwork
    >>> xor = TrainingSet([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 1, 1, 0])
    >>> net = FeedForwardNetwork([2, 3, 1], output_activation="sigmoid")
    >>> net.randomize(seed=0)
    >>> lm = LevenbergMarquardt(net, xor)
    >>> history = lm.train(max_iterations=50, target_error=1e-4)

    References
    ----------
    .. [1] C. R. Souza, "Neural Network Learning by the Levenberg-Marquardt
       Algorithm with Bayesian Regularization", 2009.
    .. [2] https://en.wikipedia.org/wiki/Levenberg%E2%80%93Marquardt_algorithm
    """

    def __init__(
        self,
        network: FeedForwardNetwork,
        training: TrainingSet,
        hessian: HessianEngine | None = None,
        nprint: int = 0,
    ):
        validate_network_to_data(network, training)

        if hessian is None:
            hessian = ChainRuleHessian()

        self.network = network
        self.training = training
        self.training_length = len(training)
        self.weight_count = network.weight_count

        self._lambda = LAMBDA_INITIAL
        self._diagonal = np.zeros(self.weight_count)
        self._deltas = np.zeros(self.weight_count)
        self._weights = None

        self.error = np.nan
        self.iteration_number = 0
        self.progress = LMProgress(nprint)

        hessian.initialize(network, training)
        self.hessian = hessian

    @property
    def lambda_(self) -> float:
        """Current damping factor."""
        return self._lambda

    @property
    def can_continue(self) -> bool:
        """Training state cannot be saved and resumed."""
        return False

    def _thread_settings(self) -> ThreadSettings:
        threads = self.hessian.threads
        if threads is None:
            raise CapabilityError(
                f"The Hessian object in use ({type(self.hessian).__name__}) "
                "does not support multi-threaded mode."
            )
        return threads

    @property
    def thread_count(self) -> int:
        """Thread count of the Hessian engine, zero to select automatically.

        Raises
        ------
        CapabilityError
            If the Hessian engine does not support multithreading.
        """
        return self._thread_settings().count

    @thread_count.setter
    def thread_count(self, value: int):
        self._thread_settings().count = value

    def _save_diagonal(self):
        self._diagonal[:] = np.diag(self.hessian.hessian)

    def _apply_lambda(self):
        # Always damp from the undamped diagonal so retries do not compound
        np.fill_diagonal(self.hessian.hessian, self._diagonal + self._lambda)

    def _update_weights(self):
        self.network.from_array(self._weights + self._deltas)

    def iteration(self) -> LMIterationResult:
        """Perform one iteration of the Levenberg-Marquardt algorithm.

        Returns
        -------
        result : LMIterationResult
            Reported error, damping and termination status of the iteration.
        """
        hessian = self.hessian
        hessian.clear()
        self._weights = self.network.to_array()

        hessian.compute()
        starting_error = current_error = hessian.sse
        self._save_diagonal()

        status = None
        retries = 0
        while status is None:
            self._apply_lambda()
            decomposition = LUDecomposition(hessian.hessian)

            if decomposition.is_nonsingular:
                self._deltas = decomposition.solve(hessian.gradient)
                self._update_weights()
                current_error = calculate_sse(self.network, self.training)

                if current_error < starting_error:
                    smaller = self._lambda / SCALE_LAMBDA
                    if smaller > 0.0:  # underflow would leave lambda at zero
                        self._lambda = smaller
                    status = LMStatus.ACCEPTED

            if status is None:
                retries += 1
                self._lambda *= SCALE_LAMBDA
                if self._lambda > LAMBDA_MAX:
                    self._lambda = LAMBDA_MAX
                    status = LMStatus.MAX_LAMBDA_REACHED

        if status == LMStatus.MAX_LAMBDA_REACHED:
            warnings.warn(
                f"Iteration {self.iteration_number}: {status.message}",
                RuntimeWarning,
                stacklevel=2,
            )

        self.error = current_error
        result = LMIterationResult(
            error=current_error,
            starting_error=starting_error,
            lambda_=self._lambda,
            status=status,
            retries=retries,
        )
        self.progress.report(self.iteration_number, result)
        self.iteration_number += 1
        return result

    def train(
        self, max_iterations: int = 100, target_error: float = 0.0
    ) -> List[LMIterationResult]:
        """Iterate until the error reaches ``target_error``.

        Parameters
        ----------
        max_iterations : int, optional
            Maximum number of iterations to perform.  Default is 100.
        target_error : float, optional
            Stop as soon as the reported error is at or below this value.

        Returns
        -------
        history : list of LMIterationResult
            One entry per iteration performed.
        """
        if max_iterations < 1:
            raise ValueError(
                f"max_iterations must be at least 1, got {max_iterations}"
            )

        history = []
        for _ in range(max_iterations):
            result = self.iteration()
            history.append(result)
            if result.error <= target_error:
                break
        return history

    def pause(self):
        """Not supported: no intermediate training state can be saved."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support pausing; training state "
            "cannot be saved"
        )

    def resume(self, state):
        """Not supported: training cannot be resumed from a saved state."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support resuming from a saved "
            "training state"
        )

    def __repr__(self):
        return (
            f"LevenbergMarquardt(network={self.network!r}, "
            f"hessian={self.hessian!r}, lambda_={self._lambda:.3g})"
        )
