"""Device abstraction for amplitude storage."""

from __future__ import annotations

import os

import torch

_DEVICE_ENV_VAR = "QTANGLE_DEVICE"


class Device:
    """
    Represents a logical simulation device with an underlying PyTorch device and dtype.

    Every amplitude vector and gate matrix in qtangle lives on the default
    device with its complex dtype. Instances should not be modified after
    construction.
    """

    def __init__(
        self,
        name: str,
        torch_device: torch.device,
        complex_dtype: torch.dtype = torch.complex128,
    ) -> None:
        """
        Initialize a Device.

        Args:
            name: Logical device name (e.g., "sv_cpu", "sv_cuda").
            torch_device: Underlying PyTorch device.
            complex_dtype: Complex dtype for amplitudes and gate matrices.
        """
        self.name = name
        self.torch_device = torch_device
        self.complex_dtype = complex_dtype

    def __repr__(self) -> str:
        return (
            f"Device(name={self.name!r}, torch_device={self.torch_device}, "
            f"complex_dtype={self.complex_dtype})"
        )

    def as_torch_device(self) -> torch.device:
        """Return the underlying PyTorch device."""
        return self.torch_device


def device(name: str) -> Device:
    """
    Create a Device instance from a device name.

    Supported device names:
        - "sv_cpu": CPU-based statevector device
        - "sv_cuda": CUDA-based statevector device (only if CUDA is available)

    Raises:
        RuntimeError: If "sv_cuda" is requested but CUDA is not available.
        ValueError: If the device name is not supported.
    """
    if name == "sv_cpu":
        return Device(name="sv_cpu", torch_device=torch.device("cpu"))
    elif name == "sv_cuda":
        if not torch.cuda.is_available():
            raise RuntimeError(
                "CUDA device requested but torch.cuda.is_available() is False"
            )
        return Device(name="sv_cuda", torch_device=torch.device("cuda"))
    else:
        supported = ["sv_cpu", "sv_cuda"]
        raise ValueError(
            f"Unsupported device name: {name!r}. Supported devices: {supported}"
        )


# Resolved once: groups created on different devices could not be merged.
_default = device(os.getenv(_DEVICE_ENV_VAR, "sv_cpu"))


def default_device() -> Device:
    """
    Return the device all amplitudes are allocated on.

    Chosen at import time from the QTANGLE_DEVICE environment variable,
    falling back to "sv_cpu".
    """
    return _default
