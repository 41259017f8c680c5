#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalogue with public-domain books (covers from Project
Gutenberg). Every seeded book starts unrated.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py        # replace books with the seed catalogue
    python scripts/seed_data.py -d     # destroy books and their reviews

This script:
1. Connects to the database using the application settings
2. Creates tables if they don't exist
3. Clears existing books (reviews go with them)
4. Inserts the seed catalogue
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookreview.database import SessionLocal, create_tables
from bookreview.models import Book, Review

BOOKS = [
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "description": "A classic novel focusing on Elizabeth Bennet as she deals with issues "
                       "of manners, upbringing, morality, education, and marriage in the "
                       "society of the landed gentry of the British Regency.",
        "genre": "Classic Romance",
        "publication_date": date(1813, 1, 28),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/1342/pg1342.cover.medium.jpg",
    },
    {
        "title": "Moby Dick; or The Whale",
        "author": "Herman Melville",
        "description": "The narrative of the obsessive quest of Ahab, captain of the whaling "
                       "ship Pequod, for revenge on Moby Dick, the giant white sperm whale "
                       "that bit off his leg on the previous voyage.",
        "genre": "Adventure Fiction",
        "publication_date": date(1851, 10, 18),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/2701/pg2701.cover.medium.jpg",
    },
    {
        "title": "Frankenstein; Or, The Modern Prometheus",
        "author": "Mary Wollstonecraft Shelley",
        "description": "A novel about eccentric scientist Victor Frankenstein, who creates a "
                       "grotesque creature in an unorthodox scientific experiment.",
        "genre": "Gothic Fiction",
        "publication_date": date(1818, 1, 1),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/84/pg84.cover.medium.jpg",
    },
    {
        "title": "The War of the Worlds",
        "author": "H. G. Wells",
        "description": "An early science fiction novel which describes an invasion of Earth "
                       "by Martians.",
        "genre": "Science Fiction",
        "publication_date": date(1898, 1, 1),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/36/pg36.cover.medium.jpg",
    },
    {
        "title": "Treasure Island",
        "author": "Robert Louis Stevenson",
        "description": "An adventure novel narrating a tale of 'buccaneers and buried gold'. "
                       "Its influence is enormous on popular perceptions of pirates.",
        "genre": "Adventure",
        "publication_date": date(1883, 11, 14),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/120/pg120.cover.medium.jpg",
    },
    {
        "title": "The Adventures of Tom Sawyer",
        "author": "Mark Twain",
        "description": "A novel about a young boy growing up along the Mississippi River. "
                       "It is set in the 1840s in the fictional town of St. Petersburg.",
        "genre": "Adventure",
        "publication_date": date(1876, 12, 1),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/74/pg74.cover.medium.jpg",
    },
    {
        "title": "The Adventures of Sherlock Holmes",
        "author": "Arthur Conan Doyle",
        "description": "A collection of twelve short stories featuring the fictional "
                       "detective Sherlock Holmes.",
        "genre": "Mystery",
        "publication_date": date(1892, 10, 14),
        "cover_image_url": "https://www.gutenberg.org/cache/epub/1661/pg1661.cover.medium.jpg",
    },
    {
        "title": "Meditations",
        "author": "Marcus Aurelius",
        "description": "A series of personal writings by the Roman Emperor Marcus Aurelius, "
                       "recording his private notes to himself and ideas on Stoic philosophy.",
        "genre": "Philosophy",
        "cover_image_url": "https://www.gutenberg.org/cache/epub/2680/pg2680.cover.medium.jpg",
    },
]


def clear_data(db: Session) -> None:
    """Delete all reviews and books."""
    print("Clearing existing books and reviews...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.commit()
    print("Data cleared.")


def create_books(db: Session) -> list[Book]:
    """Insert the seed catalogue, all unrated."""
    print("Creating books...")
    books = [Book(**data, average_rating=None) for data in BOOKS]
    db.add_all(books)
    db.commit()
    print(f"Created {len(books)} books.")
    return books


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the book catalogue")
    parser.add_argument(
        "-d",
        "--destroy",
        action="store_true",
        help="delete all books and reviews instead of seeding",
    )
    args = parser.parse_args()

    print("=" * 50)
    print("Book Review API - Database Seeder")
    print("=" * 50)

    create_tables()

    db = SessionLocal()
    try:
        clear_data(db)
        if not args.destroy:
            create_books(db)
    except SQLAlchemyError as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        return 1
    finally:
        db.close()

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
