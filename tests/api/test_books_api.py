# tests/api/test_books_api.py
from bookreviews.core.ids import new_object_id

def _create(client, payload):
    response = client.post("/api/books", json=payload)
    assert response.status_code == 201, response.text
    return response.json()

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"] == {"books": "/api/books", "reviews": "/api/reviews"}

def test_create_and_get_book(client, book_payload):
    book = _create(client, book_payload)

    assert book["isbn"] == "978-3-16-148410-0"
    assert book["publicationYear"] == 2020
    assert book["averageRating"] == 0
    assert book["numberOfReviews"] == 0
    assert book["language"] == "English"
    assert "createdAt" in book and "updatedAt" in book

    response = client.get(f"/api/books/{book['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == book_payload["title"]

def test_create_book_ignores_client_aggregates(client, book_payload):
    book_payload["averageRating"] = 4.9
    book_payload["numberOfReviews"] = 1000
    book = _create(client, book_payload)
    assert book["averageRating"] == 0
    assert book["numberOfReviews"] == 0

def test_create_book_duplicate_isbn(client, book_payload):
    _create(client, book_payload)

    response = client.post("/api/books", json=book_payload)
    assert response.status_code == 400
    assert response.json() == {"error": "A book with this ISBN already exists"}

def test_create_book_validation_errors(client):
    response = client.post("/api/books", json={"title": "Only a title", "genre": "Poetry"})
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"author", "isbn", "publicationYear", "genre"} <= fields

def test_create_book_non_object_body(client):
    response = client.post("/api/books", json=["nope"])
    assert response.status_code == 400
    assert "errors" in response.json()

def test_get_book_invalid_and_missing_id(client):
    response = client.get("/api/books/not-an-id")
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "id", "message": "Invalid book ID"}]

    response = client.get(f"/api/books/{new_object_id()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Book not found"}

def test_update_book(client, book_payload):
    book = _create(client, book_payload)
    book_payload["title"] = "Updated Title"

    response = client.put(f"/api/books/{book['id']}", json=book_payload)
    assert response.status_code == 200
    assert response.json()["title"] == "Updated Title"

    response = client.put(f"/api/books/{new_object_id()}", json=book_payload)
    assert response.status_code == 404

    response = client.put(f"/api/books/{book['id']}", json={"title": ""})
    assert response.status_code == 400

def test_delete_book_cascades(client, book_payload):
    book = _create(client, book_payload)
    review = {
        "book": book["id"],
        "reviewerName": "Lee",
        "rating": 4,
        "reviewText": "Will be removed with the book.",
    }
    assert client.post("/api/reviews", json=review).status_code == 201

    response = client.delete(f"/api/books/{book['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Book and associated reviews deleted successfully"}

    assert client.get(f"/api/books/{book['id']}").status_code == 404
    assert client.get("/api/reviews").json() == []
    assert client.delete(f"/api/books/{book['id']}").status_code == 404

def test_list_books_pagination_and_filters(client, book_payload):
    for i in range(25):
        book_payload["isbn"] = f"979{i:010d}"
        book_payload["title"] = f"Volume {i}"
        book_payload["genre"] = "Fantasy" if i % 5 == 0 else "Fiction"
        _create(client, book_payload)

    body = client.get("/api/books", params={"page": 2, "limit": 10}).json()
    assert len(body["books"]) == 10
    assert body["pagination"] == {"page": 2, "limit": 10, "total": 25, "pages": 3}

    body = client.get("/api/books").json()
    assert body["pagination"]["limit"] == 10
    assert body["pagination"]["page"] == 1

    fantasy = client.get("/api/books", params={"genre": "Fantasy"}).json()
    assert fantasy["pagination"]["total"] == 5

    titles = [b["title"] for b in client.get(
        "/api/books", params={"search": "volume 1", "sortBy": "title", "order": "asc", "limit": 50},
    ).json()["books"]]
    assert titles == sorted(titles)
    assert "Volume 1" in titles and "Volume 12" in titles

def test_list_books_bad_paging(client):
    assert client.get("/api/books", params={"page": 0}).status_code == 400
    assert client.get("/api/books", params={"limit": "ten"}).status_code == 400

def test_book_reviews_endpoint(client, book_payload):
    book = _create(client, book_payload)
    for date in ("2021-03-01T10:00:00", "2024-03-01T10:00:00"):
        client.post("/api/reviews", json={
            "book": book["id"],
            "reviewerName": "Pat",
            "rating": 3,
            "reviewText": "Listed through the book.",
            "reviewDate": date,
        })

    response = client.get(f"/api/books/{book['id']}/reviews")
    assert response.status_code == 200
    assert [r["reviewDate"][:4] for r in response.json()] == ["2024", "2021"]

    assert client.get(f"/api/books/{new_object_id()}/reviews").status_code == 404

def test_update_book_bad_id_and_bad_body(client):
    response = client.put("/api/books/not-an-id", json={"title": ""})
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"id", "title", "author", "isbn"} <= fields
