"""qtangle - a PyTorch-backed quantum computer simulator with entanglement tracking."""

__version__ = "0.1.0"

# Algorithms
from .algorithms import (
    controlled_qft_add,
    deutsch_jozsa,
    grover,
    hadamard_all,
    inverse_qft,
    oracle,
    period_finder,
    qft,
    qft_add,
    qft_add_register,
    qft_multiply_accumulate,
    quantum_function,
    random_bit,
)

# Entanglement-group engine
from .backend import EntanglementGroup, apply_gate, entangle, locked_group, locked_groups
from .core import DELTA, ONE, ZERO, Complex, Device, complex_sum, default_device, device

# Diagnostics
from .diagnostics import (
    assert_normalized,
    debug_context,
    fidelity,
    is_debug_enabled,
    set_debug_enabled,
    state_norm,
)
from .errors import InvalidDimension, LengthMismatch, OperandCountMismatch, QuantumError

# Gates
from .gates import CNOT, SQRT_NOT, SQRT_SWAP, SWAP, C, Gate, H, R, X, Y, Z, inverse, is_unitary

# Logging
from .logging import configure_logging, get_logger, set_log_level
from .qubit import Qubit
from .register import Register

# Sampling statistics
from .sampling import counts_to_probs, exact_probs, kl_divergence, sample_counts

__all__ = [
    "__version__",
    # Core
    "Complex",
    "DELTA",
    "ONE",
    "ZERO",
    "complex_sum",
    "Device",
    "default_device",
    "device",
    # Errors
    "QuantumError",
    "InvalidDimension",
    "LengthMismatch",
    "OperandCountMismatch",
    # Gates
    "Gate",
    "R",
    "C",
    "inverse",
    "H",
    "X",
    "Y",
    "Z",
    "SWAP",
    "SQRT_SWAP",
    "CNOT",
    "SQRT_NOT",
    "is_unitary",
    # Engine
    "EntanglementGroup",
    "apply_gate",
    "entangle",
    "locked_group",
    "locked_groups",
    # Qubits and registers
    "Qubit",
    "Register",
    # Sampling
    "sample_counts",
    "exact_probs",
    "counts_to_probs",
    "kl_divergence",
    # Algorithms
    "hadamard_all",
    "qft",
    "inverse_qft",
    "qft_add",
    "controlled_qft_add",
    "qft_multiply_accumulate",
    "qft_add_register",
    "oracle",
    "quantum_function",
    "grover",
    "deutsch_jozsa",
    "period_finder",
    "random_bit",
    # Diagnostics
    "state_norm",
    "assert_normalized",
    "fidelity",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
