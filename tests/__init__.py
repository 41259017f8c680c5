"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_ratings.py: Rating aggregator
- test_review_service.py: Review rules, independent of HTTP
- test_books.py: /api/v1/books endpoints
- test_reviews.py: /api/v1/reviews endpoints
- test_users.py: /api/v1/users endpoints

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_review_service.py -v
"""
