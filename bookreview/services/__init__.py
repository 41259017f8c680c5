"""
Services Package

Business logic kept separate from HTTP handling (routers):
- exceptions.py: Domain errors mapped to HTTP responses in main.py
- ratings.py: RatingAggregator, the single writer of Book.average_rating
- reviews.py: ReviewService, review create/update/delete rules
- security.py: Password hashing and JWT utilities
- rate_limiter.py: Rate limiting with slowapi
"""
