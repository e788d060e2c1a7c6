# =============================================================================
# conftest.py - Shared fixtures for the hc11-asm test suite
# =============================================================================

import pytest

from hc11_asm.assembler import Assembler, InstructionCatalog


@pytest.fixture
def catalog():
    """The full 68HC11 instruction catalog."""
    return InstructionCatalog.default()


@pytest.fixture
def asm():
    """A fresh assembler using the default catalog."""
    return Assembler()


@pytest.fixture
def reduced_catalog(catalog):
    """A three-entry catalog: ORG, NOP and BRA."""
    return InstructionCatalog([catalog.lookup(m) for m in ("ORG", "NOP", "BRA")])
