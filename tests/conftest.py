from datetime import date

import pytest

from pregnancy_calc import create_app


def fixed_clock(day):
    return lambda: day


@pytest.fixture
def app():
    app = create_app('testing')
    app.config['DATING_CLOCK'] = fixed_clock(date(2024, 3, 1))
    return app


@pytest.fixture
def client(app):
    return app.test_client()
