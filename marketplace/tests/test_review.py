from django.test import TestCase

from ..exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..lifecycle import HostelVerificationStatus
from ..models import Review
from ..services.review import ReviewService, hostel_rating
from .factories import make_hostel, make_landlord, make_student


class ReviewServiceTest(TestCase):
    def setUp(self):
        self.hostel = make_hostel(make_landlord())
        self.student = make_student()
        self.service = ReviewService(self.student)

    def test_submit_updates_aggregate(self):
        self.assertEqual(hostel_rating(self.hostel).label, "New")
        self.service.submit(self.hostel, {"rating": 4, "comment": "  Clean and quiet.  "})
        ReviewService(make_student("second")).submit(self.hostel, {"rating": 5})
        summary = hostel_rating(self.hostel)
        self.assertEqual(summary.total_reviews, 2)
        self.assertEqual(summary.average_rating, 4.5)
        self.assertEqual(Review.objects.get(student=self.student).comment, "Clean and quiet.")

    def test_one_review_per_student_and_hostel(self):
        self.service.submit(self.hostel, {"rating": 4})
        self.assertTrue(self.service.has_reviewed(self.hostel))
        with self.assertRaises(InvalidTransitionError):
            self.service.submit(self.hostel, {"rating": 2})
        self.assertEqual(Review.objects.filter(student=self.student, hostel=self.hostel).count(), 1)

    def test_rating_bounds(self):
        for rating in (0, 6):
            with self.assertRaises(ValidationError):
                self.service.submit(self.hostel, {"rating": rating})

    def test_comment_length(self):
        with self.assertRaises(ValidationError):
            self.service.submit(self.hostel, {"rating": 3, "comment": "x" * 1001})

    def test_hidden_hostel_cannot_be_reviewed(self):
        hidden = make_hostel(make_landlord("other"), verification_status=HostelVerificationStatus.REJECTED)
        with self.assertRaises(NotFoundError):
            self.service.submit(hidden, {"rating": 5})

    def test_update_and_delete_own_review(self):
        review = self.service.submit(self.hostel, {"rating": 2, "comment": "Noisy"})
        self.service.update(review, {"rating": 3})
        review.refresh_from_db()
        self.assertEqual((review.rating, review.comment), (3, "Noisy"))
        self.assertEqual(hostel_rating(self.hostel).average_rating, 3.0)
        self.service.delete(review)
        self.assertEqual(hostel_rating(self.hostel).total_reviews, 0)

    def test_cannot_touch_someone_elses_review(self):
        review = self.service.submit(self.hostel, {"rating": 2})
        other = ReviewService(make_student("other"))
        with self.assertRaises(AuthorizationError):
            other.update(review, {"rating": 5})
        with self.assertRaises(AuthorizationError):
            other.delete(review)

    def test_eligibility_messages(self):
        self.assertTrue(self.service.eligibility(self.hostel).can_review)
        landlord_view = ReviewService(make_landlord("viewer")).eligibility(self.hostel)
        self.assertFalse(landlord_view.can_review)
