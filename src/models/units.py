"""Unit conversion helpers. Internal calculations use lb and in."""


def kipft_to_lbin(val_kipft: float) -> float:
    """Convert kip-ft to lb-in (absolute value)."""
    return abs(val_kipft) * 12_000


def lbin_to_kipft(val_lbin: float) -> float:
    """Convert lb-in to kip-ft."""
    return val_lbin / 12_000


def lbin_to_kipin(val_lbin: float) -> float:
    """Convert lb-in to kip-in."""
    return val_lbin / 1000


def kip_to_lb(val_kip: float) -> float:
    """Convert kips to lb (absolute value)."""
    return abs(val_kip) * 1000


def lb_to_kip(val_lb: float) -> float:
    """Convert lb to kips."""
    return val_lb / 1000


def psi_to_ksi(val_psi: float) -> float:
    """Convert psi to ksi."""
    return val_psi / 1000
