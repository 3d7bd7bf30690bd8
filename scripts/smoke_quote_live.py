import json
import os
import sys
import tempfile

from fastapi.testclient import TestClient

from cotacao.core.config import Settings
from cotacao.main import create_app

"""Smoke script hitting the real upstream quote API.

Runs /cotacao twice against a throwaway database and prints the answers plus
the stored history. With the default 10ms store deadline the first insert
may be reported as timed out in the logs; the bid is returned regardless.
"""


def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(db_path=os.path.join(d, "smoke.db"), debug=True)
        client = TestClient(create_app(settings_override=settings))
        answers = [client.get("/cotacao") for _ in range(2)]
        history = client.get("/get-data").json()
        print(
            json.dumps(
                {
                    "answers": [
                        {"status": r.status_code, "body": r.text} for r in answers
                    ],
                    "stored_rows": len(history),
                    "last_row": history[-1] if history else None,
                },
                indent=2,
                ensure_ascii=False,
            )
        )


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
