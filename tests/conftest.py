import logging
from pathlib import Path

import pytest

from pmake.preprocessor import InterpreterContext

from tests.infrastructure.catalog_builders import create_basic_catalog


@pytest.fixture(autouse=True)
def _restore_pmake_logger():
    """main() вешает обработчик на логгер pmake; снимаем его после каждого теста."""
    log = logging.getLogger("pmake")
    handlers, level = list(log.handlers), log.level
    yield
    log.handlers[:] = handlers
    log.setLevel(level)


@pytest.fixture
def templates(tmp_path: Path) -> Path:
    """Каталог шаблонов c++ с двумя фичами (см. create_basic_catalog)."""
    return create_basic_catalog(tmp_path / "pmake-templates")


@pytest.fixture
def env_context() -> InterpreterContext:
    """Контекст, который собирает скаффолдер для консольного c++23 проекта."""
    return InterpreterContext({
        "ENV:NAME": "demo",
        "ENV:LANGUAGE": "c++",
        "ENV:STANDARD": "23",
        "ENV:KIND": "executable",
        "ENV:MODE": "console",
        "ENV:FEATURES": ["tests", "docs"],
    })
