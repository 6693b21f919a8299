"""Request helpers shared by the web tests."""

from fastapi.testclient import TestClient


def register(client: TestClient, email: str, password: str = "secret"):
    return client.post(
        "/register",
        data={"inputEmail": email, "inputPassword": password},
        follow_redirects=False,
    )


def login(client: TestClient, email: str, password: str = "secret"):
    return client.post(
        "/login",
        data={"inputEmail": email, "inputPassword": password},
        follow_redirects=False,
    )


def create_url(client: TestClient, long_url: str):
    return client.post("/urls", data={"inputLongURL": long_url}, follow_redirects=False)
