"""
Tests for the Reviews endpoints

- List reviews for a book (GET /reviews?bookId=)
- Get a single review
- Create a review (authenticated)
- Update a review (author only)
- Delete a review (author or admin)

Each mutation is also checked against the book's averageRating.
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookreview.models import Book, Review, User
from tests.conftest import get_auth_header, make_user


def book_rating(client: TestClient, book_id: int):
    return client.get(f"/api/v1/books/{book_id}").json()["averageRating"]


# =============================================================================
# List Reviews
# =============================================================================
class TestListReviews:
    """Tests for GET /api/v1/reviews?bookId="""

    def test_list_reviews_empty(self, client: TestClient, sample_book: Book):
        response = client.get(f"/api/v1/reviews?bookId={sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_reviews_with_data(self, client: TestClient, sample_review: Review):
        response = client.get(f"/api/v1/reviews?bookId={sample_review.book_id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1

        review = data[0]
        assert review["rating"] == 4
        assert review["comment"] == "I really enjoyed reading this book."
        assert review["bookId"] == sample_review.book_id
        assert review["user"] == {"id": sample_review.user_id, "name": "Test Reader"}
        assert review["book"]["title"] == "Pride and Prejudice"
        assert "createdAt" in review

    def test_list_reviews_newest_first(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        for user, rating in [(sample_user, 5), (second_user, 1)]:
            client.post(
                "/api/v1/reviews",
                json={"bookId": sample_book.id, "rating": rating, "comment": "Text"},
                headers=get_auth_header(user),
            )

        data = client.get(f"/api/v1/reviews?bookId={sample_book.id}").json()

        assert [r["user"]["name"] for r in data] == ["Second Reader", "Test Reader"]

    def test_list_reviews_requires_book_id(self, client: TestClient):
        response = client.get("/api/v1/reviews")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Book ID is required"

    def test_list_reviews_book_not_found(self, client: TestClient):
        response = client.get("/api/v1/reviews?bookId=99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book with id 99999 not found"}


# =============================================================================
# Get Review
# =============================================================================
class TestGetReview:
    """Tests for GET /api/v1/reviews/{review_id}"""

    def test_get_review(self, client: TestClient, sample_review: Review):
        response = client.get(f"/api/v1/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_review.id
        assert data["userId"] == sample_review.user_id

    def test_get_review_not_found(self, client: TestClient):
        response = client.get("/api/v1/reviews/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Review with id 99999 not found"


# =============================================================================
# Create Review
# =============================================================================
class TestCreateReview:
    """Tests for POST /api/v1/reviews"""

    def test_create_review(self, client: TestClient, sample_book: Book, sample_user: User):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_book.id, "rating": 5, "comment": "Amazing book!"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["rating"] == 5
        assert data["comment"] == "Amazing book!"
        assert data["user"]["id"] == sample_user.id
        assert book_rating(client, sample_book.id) == 5.0

    def test_create_review_unauthenticated(self, client: TestClient, sample_book: Book):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_book.id, "rating": 5, "comment": "Anonymous"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, no token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_create_review_bad_token(self, client: TestClient, sample_book: Book):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_book.id, "rating": 5, "comment": "Forged"},
            headers={"Authorization": "Bearer not-a-real-token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Not authorized, token failed"

    def test_create_review_duplicate(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_review.book_id, "rating": 1, "comment": "Again"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "already reviewed" in response.json()["message"]

        reviews = client.get(f"/api/v1/reviews?bookId={sample_review.book_id}").json()
        assert len(reviews) == 1
        assert book_rating(client, sample_review.book_id) == 4.0

    def test_create_review_book_not_found(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": 99999, "rating": 3, "comment": "Where is it?"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book with id 99999 not found"}

    def test_create_review_rating_out_of_range(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
    ):
        for rating in (0, 6):
            response = client.post(
                "/api/v1/reviews",
                json={"bookId": sample_book.id, "rating": rating, "comment": "Off the scale"},
                headers=get_auth_header(sample_user),
            )
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert "rating" in response.json()["message"]

        assert client.get(f"/api/v1/reviews?bookId={sample_book.id}").json() == []
        assert book_rating(client, sample_book.id) is None

    def test_create_review_fractional_rating(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
    ):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_book.id, "rating": 3.5, "comment": "Halfway"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_review_blank_comment(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
    ):
        response = client.post(
            "/api/v1/reviews",
            json={"bookId": sample_book.id, "rating": 3, "comment": "   "},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Comment is required" in response.json()["message"]

    def test_create_review_missing_fields(
        self,
        client: TestClient,
        sample_user: User,
    ):
        response = client.post(
            "/api/v1/reviews",
            json={"rating": 3},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_two_readers_average(
        self,
        client: TestClient,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        for user, rating in [(sample_user, 4), (second_user, 2)]:
            response = client.post(
                "/api/v1/reviews",
                json={"bookId": sample_book.id, "rating": rating, "comment": "Text"},
                headers=get_auth_header(user),
            )
            assert response.status_code == status.HTTP_201_CREATED

        assert book_rating(client, sample_book.id) == 3.0


# =============================================================================
# Update Review
# =============================================================================
class TestUpdateReview:
    """Tests for PUT /api/v1/reviews/{review_id}"""

    def test_update_review(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}",
            json={"rating": 2, "comment": "On reflection, weaker."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["rating"] == 2
        assert data["comment"] == "On reflection, weaker."
        assert book_rating(client, sample_review.book_id) == 2.0

    def test_update_review_partial(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}",
            json={"comment": "Just the words"},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["rating"] == 4

    def test_update_review_not_owner(
        self,
        client: TestClient,
        sample_review: Review,
        second_user: User,
    ):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}",
            json={"rating": 1},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "You can only update your own reviews"

        data = client.get(f"/api/v1/reviews/{sample_review.id}").json()
        assert data["rating"] == 4

    def test_update_review_invalid_rating(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        response = client.put(
            f"/api/v1/reviews/{sample_review.id}",
            json={"rating": 9},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_review_not_found(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/reviews/99999",
            json={"rating": 3},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Delete Review
# =============================================================================
class TestDeleteReview:
    """Tests for DELETE /api/v1/reviews/{review_id}"""

    def test_delete_own_review(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
    ):
        book_id = sample_review.book_id
        response = client.delete(
            f"/api/v1/reviews/{sample_review.id}",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Review removed successfully"}
        assert book_rating(client, book_id) is None

    def test_delete_review_as_admin(
        self,
        client: TestClient,
        sample_review: Review,
        admin_user: User,
    ):
        review_id = sample_review.id
        response = client.delete(
            f"/api/v1/reviews/{review_id}",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert client.get(f"/api/v1/reviews/{review_id}").status_code == status.HTTP_404_NOT_FOUND

    def test_delete_review_not_owner(
        self,
        client: TestClient,
        sample_review: Review,
        second_user: User,
    ):
        response = client.delete(
            f"/api/v1/reviews/{sample_review.id}",
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert book_rating(client, sample_review.book_id) == 4.0

    def test_delete_recomputes_remaining(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
    ):
        """Ratings 5, 4, 3; deleting the 3 leaves 4.5."""
        created = {}
        for i, rating in enumerate([5, 4, 3]):
            user = make_user(db_session, f"Reader {i}", f"reader{i}@example.com")
            response = client.post(
                "/api/v1/reviews",
                json={"bookId": sample_book.id, "rating": rating, "comment": "Text"},
                headers=get_auth_header(user),
            )
            created[rating] = (response.json()["id"], user)

        review_id, author = created[3]
        response = client.delete(
            f"/api/v1/reviews/{review_id}",
            headers=get_auth_header(author),
        )

        assert response.status_code == status.HTTP_200_OK
        assert book_rating(client, sample_book.id) == 4.5
