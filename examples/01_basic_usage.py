"""
Basic Transfer Client Usage Examples

Demonstrates simple GET, POST, PUT, DELETE requests and the builder API.
"""

from transfer_client import TransferClient, TransferClientConfig


BASE_URL = "https://jsonplaceholder.typicode.com"


def basic_get_request():
    """Simple GET request with query params."""
    print("\n=== Basic GET Request ===")

    client = TransferClient(config=TransferClientConfig.create(base_url=BASE_URL))
    result = client.simple_get("/posts", {"userId": 1})

    if result:
        print(f"Status: {result.status_code}")
        print(f"Posts: {len(result.json())}")
    else:
        print(f"Failed: {result.error_code} {result.error_string}")


def post_form():
    """POST with a form-encoded body."""
    print("\n=== POST Form ===")

    client = TransferClient(config=TransferClientConfig.create(base_url=BASE_URL))
    result = client.simple_post("/posts", {"title": "My Post", "userId": 1})

    print(f"Status: {result.status_code}")
    print(f"Created: {result.text}")


def builder_put():
    """PUT through the builder: headers, auth, then execute()."""
    print("\n=== Builder PUT ===")

    client = TransferClient(config=TransferClientConfig.create(base_url=BASE_URL))
    result = (
        client.create("/posts/1")
        .http_header("Accept", "application/json")
        .http_login("alice", "secret", "basic")
        .put({"title": "Updated Title"})
        .execute()
    )

    print(f"Status: {result.status_code}")
    print(client.debug())


def delete_request():
    """DELETE request."""
    print("\n=== DELETE Request ===")

    with TransferClient(config=TransferClientConfig.create(base_url=BASE_URL)) as client:
        result = client.simple_delete("/posts/1")
        print(f"Status: {result.status_code}")


def error_handling():
    """Transfer errors come back inside the result."""
    print("\n=== Error Handling ===")

    client = TransferClient()
    result = client.simple_get("https://nohost.invalid/")

    print(f"ok={bool(result)} code={client.error_code} message={client.error_string}")


if __name__ == "__main__":
    basic_get_request()
    post_form()
    builder_put()
    delete_request()
    error_handling()
