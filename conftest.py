import pytest

from aad_lift import config, configure, use_tape


@pytest.fixture(autouse=True)
def fresh_tape():
    """Run every test on its own tape with the default configuration."""
    saved = {"dtype": config.dtype, "record_nodes": config.record_nodes,
             "check_finite": config.check_finite}
    with use_tape() as tape:
        yield tape
    configure(**saved)
