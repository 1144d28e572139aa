"""Verify project layout and that every module imports without a network."""

from pathlib import Path


ROOT = Path(__file__).parent.parent


def test_package_directories_have_init():
    """All source packages must have __init__.py."""
    for pkg in ["fitcoach", "fitcoach/agent", "fitcoach/memory", "fitcoach/interface"]:
        init_file = ROOT / pkg / "__init__.py"
        assert init_file.exists(), f"Missing {init_file}"


def test_llm_import():
    """The LLM module must be importable."""
    from fitcoach.agent import llm
    assert hasattr(llm, "get_client")
    assert hasattr(llm, "GeminiGenerator")


def test_cli_import():
    from fitcoach.interface import cli
    assert callable(cli.main)
