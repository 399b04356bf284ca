"""
Tests for Rating Aggregation

Tests app.services.ratings and the transactional guarantees around it:
- averageRating is rounded to one decimal, halves up, 0 when unreviewed
- stored statistics can be recomputed from review rows
- a failure while recalculating rolls back the review change
- the (user, book) unique constraint holds at the storage level
- concurrent writers leave the statistics matching the stored reviews
"""

import threading

import pytest
from sqlalchemy import create_engine, func, select, update
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.database import Base
from app.exceptions import ConflictError
from app.models import Book, Genre, Review, User
from app.services import ratings, reviews
from tests.conftest import make_user


def review_count(db: Session) -> int:
    return db.scalar(select(func.count(Review.id)))


def add_reviews(db: Session, book: Book, make_reviewer, values: list[int]) -> None:
    for i, rating in enumerate(values):
        reviewer = make_reviewer(f"rater{i}")
        reviews.create_review(
            db,
            book_id=book.id,
            user_id=reviewer.id,
            rating=rating,
            comment=f"{rating} stars",
        )


# =============================================================================
# Rounding
# =============================================================================


class TestRoundRating:
    """Tests for round_rating()"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, 0.0),
            (5, 5.0),
            (4.25, 4.3),
            (4.35, 4.4),
            (4.333333, 4.3),
            (3.6666667, 3.7),
            (2.05, 2.1),
        ],
    )
    def test_round_rating(self, value, expected):
        assert ratings.round_rating(value) == expected


# =============================================================================
# Aggregation
# =============================================================================


class TestBookStatistics:
    """Tests for compute_book_statistics() and recalculate_book_rating()"""

    def test_statistics_without_reviews(self, db_session: Session, sample_book: Book):
        """Test an unreviewed book has zeroed statistics."""
        stats = ratings.compute_book_statistics(db_session, sample_book.id)

        assert stats.average_rating == 0.0
        assert stats.total_reviews == 0

    def test_average_is_rounded(
        self, db_session: Session, sample_book: Book, make_reviewer
    ):
        """Test 5, 4, 4 averages to 4.3."""
        add_reviews(db_session, sample_book, make_reviewer, [5, 4, 4])

        db_session.refresh(sample_book)
        assert sample_book.average_rating == 4.3
        assert sample_book.total_reviews == 3

    def test_average_half_rounds_up(
        self, db_session: Session, sample_book: Book, make_reviewer
    ):
        """Test 4, 5 averages to exactly 4.5."""
        add_reviews(db_session, sample_book, make_reviewer, [4, 5])
        db_session.refresh(sample_book)
        assert sample_book.average_rating == 4.5

    def test_quarter_average_rounds_up(
        self, db_session: Session, sample_book: Book, make_reviewer
    ):
        """Test 1, 2, 2, 2 (mean 1.75) is stored as 1.8."""
        add_reviews(db_session, sample_book, make_reviewer, [1, 2, 2, 2])

        db_session.refresh(sample_book)
        assert sample_book.average_rating == 1.8
        assert sample_book.total_reviews == 4

    def test_recalculate_missing_book(self, db_session: Session):
        """Test recalculating a book that does not exist is a no-op."""
        assert ratings.recalculate_book_rating(db_session, 99999) is None

    def test_recalculate_all_repairs_drift(
        self,
        db_session: Session,
        sample_review: Review,
        sample_book: Book,
        multiple_books: list[Book],
    ):
        """Test stored values that disagree with the reviews are corrected."""
        sample_book.average_rating = 1.0
        sample_book.total_reviews = 9
        multiple_books[0].total_reviews = 3
        db_session.commit()

        updated = ratings.recalculate_all_book_ratings(db_session)

        assert updated == 16
        db_session.refresh(sample_book)
        assert sample_book.average_rating == 4.0
        assert sample_book.total_reviews == 1
        db_session.refresh(multiple_books[0])
        assert multiple_books[0].total_reviews == 0
        assert multiple_books[0].average_rating == 0.0


# =============================================================================
# Transactional Guarantees
# =============================================================================


class TestRatingConsistency:
    """A review change and its book's statistics commit together or not at all"""

    @staticmethod
    def fail_recalculation(monkeypatch):
        def boom(db, book_id):
            raise RuntimeError("aggregation failed")

        monkeypatch.setattr("app.services.reviews.recalculate_book_rating", boom)

    def test_create_rolled_back_when_aggregation_fails(
        self,
        monkeypatch,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
    ):
        self.fail_recalculation(monkeypatch)

        with pytest.raises(RuntimeError):
            reviews.create_review(
                db_session,
                book_id=sample_book.id,
                user_id=sample_user.id,
                rating=5,
                comment="Never stored.",
            )

        assert review_count(db_session) == 0
        db_session.refresh(sample_book)
        assert sample_book.total_reviews == 0

    def test_update_rolled_back_when_aggregation_fails(
        self,
        monkeypatch,
        db_session: Session,
        sample_review: Review,
        sample_user: User,
    ):
        self.fail_recalculation(monkeypatch)

        with pytest.raises(RuntimeError):
            reviews.update_review(
                db_session,
                review_id=sample_review.id,
                caller_id=sample_user.id,
                fields={"rating": 1},
            )

        db_session.refresh(sample_review)
        assert sample_review.rating == 4

    def test_delete_rolled_back_when_aggregation_fails(
        self,
        monkeypatch,
        db_session: Session,
        sample_review: Review,
        sample_user: User,
    ):
        self.fail_recalculation(monkeypatch)

        with pytest.raises(RuntimeError):
            reviews.delete_review(
                db_session,
                review_id=sample_review.id,
                caller_id=sample_user.id,
            )

        assert review_count(db_session) == 1

    def test_duplicate_review_leaves_statistics_unchanged(
        self,
        db_session: Session,
        sample_review: Review,
        sample_book: Book,
        sample_user: User,
    ):
        with pytest.raises(ConflictError):
            reviews.create_review(
                db_session,
                book_id=sample_book.id,
                user_id=sample_user.id,
                rating=1,
                comment="Second opinion.",
            )

        assert review_count(db_session) == 1
        db_session.refresh(sample_book)
        assert sample_book.average_rating == 4.0
        assert sample_book.total_reviews == 1

    def test_unique_constraint_at_storage_level(
        self,
        db_session: Session,
        sample_review: Review,
    ):
        """Test the database itself rejects a second (user, book) row."""
        db_session.add(
            Review(
                book_id=sample_review.book_id,
                user_id=sample_review.user_id,
                rating=3,
                comment="Inserted directly.",
            )
        )

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert review_count(db_session) == 1

    def test_rating_check_constraint(
        self,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
    ):
        """Test ratings outside 1-5 are rejected by the database."""
        db_session.add(
            Review(
                book_id=sample_book.id,
                user_id=sample_user.id,
                rating=7,
                comment="Off the scale.",
            )
        )

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_non_duplicate_integrity_error_is_not_a_conflict(
        self,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
    ):
        """Test a constraint failure other than uniqueness propagates as is."""
        with pytest.raises(IntegrityError):
            reviews.create_review(
                db_session,
                book_id=sample_book.id,
                user_id=sample_user.id,
                rating=7,
                comment="Bypassed the schema.",
            )

        assert review_count(db_session) == 0
        db_session.refresh(sample_book)
        assert sample_book.total_reviews == 0


# =============================================================================
# Concurrent Writers
# =============================================================================


class TestConcurrentReviews:
    """
    Two sessions writing reviews for the same book at once.

    Uses a file-backed SQLite database so each thread gets its own
    connection; the busy timeout makes the second writer wait for the
    first to commit.
    """

    @pytest.fixture
    def session_factory(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'concurrent.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)

        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

        engine.dispose()

    @pytest.fixture
    def seeded(self, session_factory):
        """Commit two users and a book; return their IDs."""
        with session_factory() as db:
            first = make_user(db, "racer1")
            second = make_user(db, "racer2")
            book = Book(
                title="The Left Hand of Darkness",
                author="Ursula K. Le Guin",
                genre=Genre.SCIENCE_FICTION,
                description="An envoy on a planet whose people have no fixed sex.",
                published_year=1969,
            )
            db.add(book)
            db.commit()
            return first.id, second.id, book.id

    @staticmethod
    def run_concurrently(session_factory, calls) -> list:
        """Run each call in its own thread and session; collect results or errors."""
        barrier = threading.Barrier(len(calls))
        outcomes = [None] * len(calls)

        def worker(index, call):
            with session_factory() as db:
                barrier.wait()
                try:
                    outcomes[index] = call(db)
                except Exception as e:
                    outcomes[index] = e

        threads = [
            threading.Thread(target=worker, args=(i, call))
            for i, call in enumerate(calls)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        return outcomes

    def test_duplicate_review_race(self, session_factory, seeded):
        """Test only one of two simultaneous reviews by one user is stored."""
        user_id, _, book_id = seeded

        def submit(rating):
            return lambda db: reviews.create_review(
                db, book_id=book_id, user_id=user_id, rating=rating, comment="Race."
            ).id

        outcomes = self.run_concurrently(session_factory, [submit(5), submit(2)])

        created = [o for o in outcomes if isinstance(o, int)]
        conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
        assert len(created) == 1, outcomes
        assert len(conflicts) == 1, outcomes
        assert conflicts[0].message == reviews.DUPLICATE_REVIEW_MESSAGE

        with session_factory() as db:
            assert review_count(db) == 1
            book = db.get(Book, book_id)
            assert book.total_reviews == 1
            assert book.average_rating == db.get(Review, created[0]).rating

    def test_concurrent_reviews_by_different_users(self, session_factory, seeded):
        """Test statistics include both reviews when two users post at once."""
        first_id, second_id, book_id = seeded

        def submit(user_id, rating):
            return lambda db: reviews.create_review(
                db, book_id=book_id, user_id=user_id, rating=rating, comment="Race."
            ).id

        outcomes = self.run_concurrently(
            session_factory, [submit(first_id, 5), submit(second_id, 2)]
        )

        assert all(isinstance(o, int) for o in outcomes), outcomes

        with session_factory() as db:
            book = db.get(Book, book_id)
            assert book.total_reviews == 2
            assert book.average_rating == 3.5


# =============================================================================
# Row Locking
# =============================================================================


class TestBookRowLock:
    """Tests for lock_book_statement()"""

    def test_postgresql_uses_no_key_update(self):
        """Test the lock is compatible with the review foreign key's KEY SHARE lock."""
        sql = str(
            ratings.lock_book_statement(1).compile(dialect=postgresql.dialect())
        )

        assert sql.rstrip().endswith("FOR NO KEY UPDATE")

    def test_sqlite_ignores_lock(self, db_session: Session, sample_book: Book):
        """Test the locked SELECT still loads the book on SQLite."""
        book = db_session.execute(
            ratings.lock_book_statement(sample_book.id)
        ).scalar_one()

        assert book.id == sample_book.id

    def test_lock_refreshes_stale_identity(self, db_session: Session, sample_book: Book):
        """Test a row changed outside the ORM is reloaded into the loaded object."""
        db_session.connection().execute(
            update(Book.__table__)
            .where(Book.__table__.c.id == sample_book.id)
            .values(total_reviews=7)
        )
        assert sample_book.total_reviews == 0

        book = db_session.execute(
            ratings.lock_book_statement(sample_book.id)
        ).scalar_one()

        assert book is sample_book
        assert book.total_reviews == 7
