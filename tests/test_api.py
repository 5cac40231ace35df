from __future__ import annotations

from fastapi.testclient import TestClient

from books_api.storage import SqlBookStore


def _post_book(client: TestClient, title: str, author: str, be_date: str) -> int:
    response = client.post("/books", json={"title": title, "author": author, "publishedDate": be_date})
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_health_check(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_buddhist_date_is_returned_as_gregorian(client: TestClient) -> None:
    book_id = _post_book(client, "Spring in Action", "Steve", "2568-09-14")

    response = client.get("/books", params={"author": "Steve"})

    assert response.status_code == 200
    body = response.json()
    assert body["content"][0]["id"] == book_id
    assert body["content"][0]["publishedDate"] == "2025-09-14"
    assert body["totalElements"] == 1


def test_blank_fields_and_bad_date_are_reported_together(client: TestClient) -> None:
    response = client.post("/books", json={"title": "", "author": "", "publishedDate": "25-09-14"})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["path"] == "/books"
    assert "timestamp" in body
    assert {e["field"] for e in body["errors"]} == {"title", "author", "publishedDate"}


def test_year_not_after_1000_is_rejected(client: TestClient) -> None:
    response = client.post("/books", json={"title": "Too Old", "author": "Anon", "publishedDate": "1542-01-01"})

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "publishedDate", "message": "year must be > 1000"}]


def test_future_year_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/books", json={"title": "From the Future", "author": "Time", "publishedDate": "2569-01-01"}
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "publishedDate"


def test_non_string_fields_use_the_same_error_envelope(client: TestClient) -> None:
    response = client.post("/books", json={"title": 42, "author": "Anon", "publishedDate": "2568-01-01"})

    assert response.status_code == 400
    body = response.json()
    assert body["errors"][0]["field"] == "title"
    assert body["path"] == "/books"


def test_malformed_json_is_a_bad_request(client: TestClient) -> None:
    response = client.post("/books", content="{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["errors"] == [{"message": "Malformed JSON body"}]


def test_author_filter_pagination_and_sort(client: TestClient) -> None:
    _post_book(client, "A1", "Alice", "2565-01-01")
    _post_book(client, "A2", "Alice", "2567-01-01")
    _post_book(client, "B1", "Bob", "2566-01-01")

    first = client.get("/books", params={"author": "Alice", "page": 0, "size": 1, "sort": "publishedDate,desc"})
    second = client.get("/books", params={"author": "Alice", "page": 1, "size": 1, "sort": "publishedDate,desc"})

    assert first.status_code == 200
    body = first.json()
    assert len(body["content"]) == 1
    assert body["content"][0]["author"] == "Alice"
    assert body["content"][0]["title"] == "A2"
    assert body["totalElements"] == 2
    assert body["totalPages"] == 2
    assert body["first"] is True
    assert body["last"] is False
    assert body["sort"] == "publishedDate: DESC"

    assert second.json()["content"][0]["title"] == "A1"
    assert second.json()["last"] is True


def test_author_filter_ignores_case_and_never_leaks_other_authors(client: TestClient) -> None:
    _post_book(client, "A1", "Alice", "2565-01-01")
    _post_book(client, "A2", "alice", "2566-01-01")
    _post_book(client, "A3", "Alicia", "2566-01-01")

    body = client.get("/books", params={"author": "ALICE"}).json()

    assert body["totalElements"] == 2
    assert all(b["author"].lower() == "alice" for b in body["content"])
    assert body["size"] == 20
    assert body["sort"] == "publishedDate: ASC"


def test_missing_author_is_a_bad_request(client: TestClient) -> None:
    for params in ({}, {"author": "  "}):
        response = client.get("/books", params=params)

        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "author", "message": "author is required"}]


def test_invalid_paging_parameters_are_bad_requests(client: TestClient) -> None:
    assert client.get("/books/all", params={"page": -1}).status_code == 400
    assert client.get("/books/all", params={"size": 0}).status_code == 400

    response = client.get("/books/all", params={"sort": "rating"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "sort"


def test_bulk_insert_returns_one_id_per_item(client: TestClient) -> None:
    response = client.post(
        "/books/bulk",
        json=[
            {"title": "Book A", "author": "Alice", "publishedDate": "2566-01-01"},
            {"title": "Book B", "author": "Bob", "publishedDate": "2567-02-01"},
        ],
    )

    assert response.status_code == 201
    ids = [item["id"] for item in response.json()]
    assert len(ids) == 2

    listing = client.get("/books/all").json()
    assert [b["id"] for b in listing["content"]] == ids
    assert [b["publishedDate"] for b in listing["content"]] == ["2023-01-01", "2024-02-01"]


def test_bulk_insert_with_invalid_item_stores_nothing(client: TestClient, store: SqlBookStore) -> None:
    response = client.post(
        "/books/bulk",
        json=[
            {"title": "Book A", "author": "Alice", "publishedDate": "2566-01-01"},
            {"title": "Book B", "author": "", "publishedDate": "2567-02-01"},
        ],
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "[1].author", "message": "author must not be empty"}]
    assert store.find_all(0, 10).total == 0


def test_all_books_sorted_by_id_by_default(client: TestClient) -> None:
    ids = [
        _post_book(client, "Later", "X", "2567-01-01"),
        _post_book(client, "Earlier", "Y", "2560-01-01"),
    ]

    body = client.get("/books/all").json()

    assert [b["id"] for b in body["content"]] == ids
    assert body["sort"] == "id: ASC"
    assert body["number"] == 0


def test_page_beyond_the_largest_offset_is_a_bad_request(client: TestClient) -> None:
    for path, params in (("/books/all", {}), ("/books", {"author": "Alice"})):
        response = client.get(path, params={**params, "page": 10**19})

        assert response.status_code == 400
        body = response.json()
        assert body["errors"][0]["field"] == "page"
        assert body["path"] == path


def test_author_filter_folds_non_ascii_case(client: TestClient) -> None:
    book_id = _post_book(client, "Germinal", "Émile Zola", "2428-03-01")

    body = client.get("/books", params={"author": "émile zola"}).json()

    assert body["totalElements"] == 1
    assert body["content"][0]["id"] == book_id
    assert body["content"][0]["author"] == "Émile Zola"
