"""Basic project scaffolding tests."""

import importlib


def test_package_importable() -> None:
    """Verify the top-level package is importable."""
    import battleship_solver  # noqa: F401  (import used to ensure availability)

    assert battleship_solver is not None


def test_submodules_exist() -> None:
    """All primary submodules should be importable."""
    modules = [
        "battleship_solver.cli",
        "battleship_solver.config",
        "battleship_solver.engine.grid",
        "battleship_solver.engine.fleet",
        "battleship_solver.engine.probability",
        "battleship_solver.engine.targeting",
        "battleship_solver.engine.shots",
        "battleship_solver.engine.game",
        "battleship_solver.sim",
        "battleship_solver.telemetry",
    ]

    for module in modules:
        assert importlib.import_module(module) is not None
