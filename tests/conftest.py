import os

import pytest

os.environ.setdefault("APP_ENV", "test")


@pytest.fixture
def company_globals():
    return {
        "company": {
            "departments": [
                {
                    "name": "Engineering",
                    "employees": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}],
                }
            ]
        }
    }


@pytest.fixture
def user_globals():
    return {
        "user": {
            "name": "Ada",
            "nickname": "A",
            "age": 36,
            "address": {"city": "London"},
            "tags": ["math", "engines"],
        },
        "count": 3,
    }


@pytest.fixture
def node_globals():
    return {
        "__nodeNames": {"node1": "Fetch users"},
        "node1": {"rows": [1, 2]},
        "node2": {"__nodeName": "Parse", "ok": True},
    }
