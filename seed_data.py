"""
Seed Demo Data: the dataset a fresh store starts with.

Creates an admin, ten teachers, five students, fifteen courses, two sections
of lessons, enrollments, a payment ledger covering every payment status,
course materials, a message thread and a handful of reviews.

Seeded ids stay below ``FIRST_FREE_ID`` so generated ids never collide with them.
"""

from __future__ import annotations

from dataclasses import replace

from models import (
    Course,
    CourseMaterial,
    CourseReview,
    CourseSection,
    Enrollment,
    Lesson,
    Message,
    Payment,
    User,
)
from store import DomainStore

FIRST_FREE_ID = 1001


DEMO_USERS = [
    # id, email, first, last, role, join_date, bio, subjects
    ("1", "admin@email.com", "Admin", "User", "admin", "2024-01-01", None, []),
    ("2", "dr.wilson@email.com", "Dr. James", "Wilson", "teacher", "2024-01-05",
     "PhD in Mathematics with 15 years of teaching experience", ["Mathematics", "Calculus", "Statistics"]),
    ("3", "prof.anderson@email.com", "Prof. Sarah", "Anderson", "teacher", "2024-01-08",
     "Physics professor specializing in quantum mechanics", ["Physics", "Quantum Mechanics", "Thermodynamics"]),
    ("4", "dr.brown@email.com", "Dr. Michael", "Brown", "teacher", "2024-01-10",
     "Chemistry expert with focus on organic chemistry", ["Chemistry", "Organic Chemistry", "Biochemistry"]),
    ("5", "student@example.com", "John", "Doe", "student", "2024-01-15", None, []),
    ("6", "alice.johnson@example.com", "Alice", "Johnson", "student", "2024-01-16", None, []),
    ("7", "bob.smith@example.com", "Bob", "Smith", "student", "2024-01-17", None, []),
    ("8", "emily.johnson@email.com", "Ms. Emily", "Johnson", "teacher", "2024-01-12",
     "English Literature specialist with focus on creative writing", ["English", "Literature", "Creative Writing"]),
    ("9", "carlos.rodriguez@email.com", "Prof. Carlos", "Rodriguez", "teacher", "2024-01-15",
     "Native Spanish speaker with 10+ years teaching experience", ["Spanish", "Language Arts", "Cultural Studies"]),
    ("10", "alex.chen@email.com", "Dr. Alex", "Chen", "teacher", "2024-01-18",
     "Computer Science PhD with industry experience in software development",
     ["Computer Science", "Programming", "Web Development"]),
    ("11", "maria.gonzalez@email.com", "Prof. Maria", "Gonzalez", "teacher", "2024-01-20",
     "Art historian and museum curator specializing in contemporary art",
     ["Art History", "Visual Arts", "Art Appreciation"]),
    ("12", "lisa.park@email.com", "Dr. Lisa", "Park", "teacher", "2024-01-22",
     "Environmental scientist with focus on climate change research",
     ["Environmental Science", "Biology", "Earth Science"]),
    ("13", "robert.kim@email.com", "Dr. Robert", "Kim", "teacher", "2024-01-25",
     "Clinical psychologist and researcher in cognitive psychology",
     ["Psychology", "Behavioral Science", "Research Methods"]),
    ("14", "david.martinez@email.com", "Prof. David", "Martinez", "teacher", "2024-01-28",
     "Professional musician and composer with conservatory training",
     ["Music Theory", "Composition", "Music History"]),
    ("15", "sarah.wilson@example.com", "Sarah", "Wilson", "student", "2024-01-10", None, []),
    ("16", "mike.chen@example.com", "Mike", "Chen", "student", "2024-01-12", None, []),
    ("17", "emma.davis@example.com", "Emma", "Davis", "student", "2024-01-14", None, []),
]

DEMO_COURSES = [
    # id, title, teacher_id, price, subject, level, duration, lessons, enrolled, rating, reviews, created, updated
    ("1", "Advanced Mathematics", "2", 99, "Mathematics", "advanced", "12 weeks", 24, 145, 4.8, 89,
     "2024-01-10", "2024-01-20"),
    ("2", "Physics Fundamentals", "3", 89, "Physics", "intermediate", "10 weeks", 20, 98, 4.7, 67,
     "2024-01-12", "2024-01-22"),
    ("3", "Chemistry Lab Essentials", "4", 79, "Chemistry", "intermediate", "8 weeks", 16, 76, 4.6, 54,
     "2024-01-15", "2024-01-25"),
    ("4", "Calculus Fundamentals", "2", 109, "Mathematics", "advanced", "14 weeks", 28, 67, 4.9, 45,
     "2024-01-18", "2024-01-28"),
    ("5", "Biology Essentials", "4", 85, "Biology", "beginner", "10 weeks", 20, 123, 4.5, 78,
     "2024-01-20", "2024-01-30"),
    ("6", "World History", "3", 75, "History", "intermediate", "12 weeks", 24, 89, 4.4, 62,
     "2024-01-22", "2024-02-01"),
    ("7", "English Literature & Composition", "8", 95, "English", "advanced", "12 weeks", 24, 112, 4.7, 73,
     "2024-01-25", "2024-02-04"),
    ("8", "Spanish for Beginners", "9", 69, "Language", "beginner", "10 weeks", 30, 156, 4.6, 94,
     "2024-01-28", "2024-02-07"),
    ("9", "Computer Science Fundamentals", "10", 129, "Computer Science", "beginner", "14 weeks", 28, 203,
     4.8, 127, "2024-02-01", "2024-02-11"),
    ("10", "Art History & Appreciation", "11", 79, "Art", "beginner", "8 weeks", 16, 87, 4.5, 56,
     "2024-02-03", "2024-02-13"),
    ("11", "Environmental Science", "12", 92, "Science", "intermediate", "10 weeks", 20, 94, 4.6, 61,
     "2024-02-05", "2024-02-15"),
    ("12", "Psychology Introduction", "13", 88, "Psychology", "beginner", "10 weeks", 20, 134, 4.7, 82,
     "2024-02-08", "2024-02-18"),
    ("13", "Statistics & Data Analysis", "2", 115, "Mathematics", "intermediate", "12 weeks", 24, 78, 4.8, 52,
     "2024-02-10", "2024-02-20"),
    ("14", "Creative Writing Workshop", "8", 85, "English", "intermediate", "8 weeks", 16, 65, 4.6, 43,
     "2024-02-12", "2024-02-22"),
    ("15", "Music Theory & Composition", "14", 98, "Music", "beginner", "10 weeks", 20, 91, 4.5, 58,
     "2024-02-15", "2024-02-25"),
]

DEMO_SECTIONS = [
    {
        "id": "1", "course_id": "1", "title": "Algebra Fundamentals",
        "description": "Basic algebraic concepts and operations", "order": 1,
        "lessons": [
            ("1", "Linear Equations", "Understanding and solving linear equations", "video", "15 min", 1, True),
            ("2", "Quadratic Functions", "Working with quadratic equations and their graphs", "text", "20 min", 2, False),
            ("3", "Practice Problems Set 1", "Algebra practice problems with solutions", "pdf", "30 min", 3, False),
        ],
    },
    {
        "id": "2", "course_id": "1", "title": "Calculus Introduction",
        "description": "Introduction to differential and integral calculus", "order": 2,
        "lessons": [
            ("4", "Limits and Continuity", "Understanding limits and continuous functions", "video", "25 min", 1, False),
            ("5", "Derivatives", "Introduction to derivatives and differentiation", "text", "30 min", 2, False),
            ("6", "Integration Basics", "Fundamental concepts of integration", "video", "35 min", 3, False),
        ],
    },
]

DEMO_ENROLLMENTS = [
    Enrollment(id="1", student_id="5", course_id="1", enrolled_at="2024-01-20", last_accessed_at="2024-01-30",
               progress=100, completed_lessons=["1", "2", "4", "5", "6"], payment_status="paid",
               payment_id="pay_1", completed_at="2024-02-15"),
    Enrollment(id="2", student_id="5", course_id="2", enrolled_at="2024-01-22", last_accessed_at="2024-01-29",
               progress=45, completed_lessons=["7", "8"], payment_status="paid", payment_id="pay_2"),
    Enrollment(id="3", student_id="5", course_id="3", enrolled_at="2024-01-25", last_accessed_at="2024-01-25",
               progress=0, payment_status="pending"),
    Enrollment(id="4", student_id="6", course_id="1", enrolled_at="2024-01-18", last_accessed_at="2024-02-10",
               progress=100, completed_lessons=["1", "2", "4", "5", "6"], payment_status="paid",
               payment_id="pay_4", completed_at="2024-02-10"),
    Enrollment(id="5", student_id="15", course_id="9", enrolled_at="2024-02-01", last_accessed_at="2024-02-20",
               progress=100, completed_lessons=["1", "2", "3", "4", "5"], payment_status="paid",
               payment_id="pay_5", completed_at="2024-02-20"),
]

DEMO_PAYMENTS = [
    # id, student, course, amount, status, method, txn, created, completed, fees(proc, gw, platform, net)
    ("pay_1", "5", "1", 99, "completed", "Credit Card", "txn_1234567890",
     "2024-01-20T10:30:00Z", "2024-01-20T10:30:15Z", (2.97, 2.97, 9.90, 86.13)),
    ("pay_2", "5", "2", 89, "completed", "PayPal", "txn_0987654321",
     "2024-01-22T14:15:00Z", "2024-01-22T14:15:10Z", (2.67, 2.67, 8.90, 77.43)),
    ("pay_3", "5", "3", 79, "pending", "Credit Card", "txn_1122334455",
     "2024-01-25T09:20:00Z", None, (2.37, 2.37, 7.90, 68.73)),
    ("pay_4", "6", "1", 99, "completed", "Credit Card", "txn_4455667788",
     "2024-01-18T16:45:00Z", "2024-01-18T16:45:12Z", (2.97, 2.97, 9.90, 86.13)),
    ("pay_5", "15", "9", 129, "completed", "PayPal", "txn_5566778899",
     "2024-02-01T11:30:00Z", "2024-02-01T11:30:08Z", (3.87, 3.87, 12.90, 112.23)),
    ("pay_6", "16", "2", 89, "failed", "Credit Card", "txn_6677889900",
     "2024-02-03T08:15:00Z", None, (2.67, 2.67, 8.90, 77.43)),
    ("pay_7", "17", "8", 69, "refunded", "PayPal", "txn_7788990011",
     "2024-01-28T13:20:00Z", "2024-01-28T13:20:05Z", (2.07, 2.07, 6.90, 60.03)),
    ("pay_8", "6", "7", 95, "partially_refunded", "Credit Card", "txn_8899001122",
     "2024-01-30T15:45:00Z", "2024-01-30T15:45:18Z", (2.85, 2.85, 9.50, 82.65)),
    ("pay_9", "15", "12", 88, "completed", "Apple Pay", "txn_9900112233",
     "2024-02-08T12:00:00Z", "2024-02-08T12:00:03Z", (2.64, 2.64, 8.80, 76.56)),
    ("pay_10", "16", "10", 79, "completed", "Google Pay", "txn_0011223344",
     "2024-02-12T09:30:00Z", "2024-02-12T09:30:07Z", (2.37, 2.37, 7.90, 68.73)),
]

DEMO_REFUNDS = {
    "pay_7": ("2024-02-05T10:15:00Z", 69, "Course not as expected"),
    "pay_8": ("2024-02-10T14:30:00Z", 47.50, "Partial completion"),
}

DEMO_MATERIALS = [
    ("1", "Course Syllabus.pdf", "pdf", "2.3 MB", "/materials/syllabus.pdf", "2024-01-10", 145, False),
    ("2", "Algebra Reference Sheet.pdf", "pdf", "1.8 MB", "/materials/algebra-ref.pdf", "2024-01-12", 98, False),
    ("3", "Practice Problems Set 1.zip", "zip", "15.2 MB", "/materials/practice-set-1.zip", "2024-01-15", 67, True),
    ("4", "Video Lectures Collection.zip", "zip", "450 MB", "/materials/video-lectures.zip", "2024-01-18", 45, True),
    ("5", "Solutions Manual.pdf", "pdf", "8.7 MB", "/materials/solutions-manual.pdf", "2024-01-20", 78, True),
]

DEMO_MESSAGES = [
    ("1", "2", "5", "Hi! I've reviewed your latest assignment on quadratic equations. Excellent work overall!",
     "2024-01-30T10:30:00Z", "2024-01-30T10:35:00Z"),
    ("2", "5", "2", "Thank you! I found the graphing section particularly challenging.",
     "2024-01-30T10:45:00Z", "2024-01-30T10:50:00Z"),
    ("3", "2", "5", "That's completely normal. Graphing quadratic functions requires practice. "
     "I've uploaded some additional practice problems to help you.",
     "2024-01-30T11:00:00Z", "2024-01-30T11:05:00Z"),
    ("4", "2", "5", "Great work on your last assignment! "
     "You've shown significant improvement in your problem-solving approach.",
     "2024-01-30T14:15:00Z", "2024-01-30T14:15:00Z"),
]

DEMO_REVIEWS = [
    CourseReview(
        id="1", course_id="1", student_id="6", student_name="Alice Johnson", rating=5,
        title="Excellent course with clear explanations",
        comment="Dr. Wilson's teaching style is exceptional. The course content is well-structured "
                "and the examples are very helpful.",
        pros=["Clear explanations", "Well-structured content", "Great examples", "Responsive instructor"],
        cons=["Could use more practice problems"],
        created_at="2024-02-12", updated_at="2024-02-12", helpful_votes=15, is_verified_purchase=True,
    ),
    CourseReview(
        id="2", course_id="1", student_id="15", student_name="Sarah Wilson", rating=4,
        title="Good course but challenging",
        comment="The course covers a lot of material and can be quite challenging. "
                "I would recommend having a strong algebra foundation first.",
        pros=["Comprehensive content", "Knowledgeable instructor", "Good preparation for college"],
        cons=["Very challenging", "Fast-paced", "Requires strong math background"],
        created_at="2024-02-10", updated_at="2024-02-10", helpful_votes=8, is_verified_purchase=True,
    ),
    CourseReview(
        id="3", course_id="9", student_id="15", student_name="Sarah Wilson", rating=5,
        title="Perfect introduction to programming",
        comment="As someone with no programming experience, this course was perfect for me.",
        pros=["Beginner-friendly", "Hands-on projects", "Clear explanations", "Good mix of languages"],
        cons=["Could cover more advanced topics"],
        created_at="2024-02-22", updated_at="2024-02-22", helpful_votes=23, is_verified_purchase=True,
    ),
    CourseReview(
        id="4", course_id="2", student_id="16", student_name="Mike Chen", rating=4,
        title="Solid physics foundation",
        comment="Prof. Anderson does a great job explaining physics concepts. "
                "Some topics could be explained in more detail.",
        pros=["Great lab exercises", "Practical applications", "Good foundation", "Engaging instructor"],
        cons=["Some topics need more detail", "Could use more visual aids"],
        created_at="2024-02-18", updated_at="2024-02-18", helpful_votes=12, is_verified_purchase=True,
    ),
    CourseReview(
        id="5", course_id="8", student_id="17", student_name="Emma Davis", rating=5,
        title="¡Excelente curso de español!",
        comment="Prof. Rodriguez is an amazing teacher! The course is well-paced and includes great "
                "cultural insights.",
        pros=["Native speaker instructor", "Cultural insights", "Interactive lessons", "Great pronunciation guides"],
        cons=["Could use more advanced grammar"],
        created_at="2024-02-25", updated_at="2024-02-25", helpful_votes=19, is_verified_purchase=True,
    ),
]


def seed(store: DomainStore) -> dict:
    """Load the demo dataset into ``store``. Returns a summary dict."""
    with store.transaction():
        for uid, email, first, last, role, joined, bio, subjects in DEMO_USERS:
            store.users.append(User(
                id=uid, email=email, first_name=first, last_name=last, role=role,
                join_date=joined, status="active", bio=bio, subjects=list(subjects),
            ))

        teacher_names = {u.id: u.full_name for u in store.users}
        for (cid, title, teacher_id, price, subject, level, duration, lessons,
             enrolled, rating, reviews, created, updated) in DEMO_COURSES:
            store.courses.append(Course(
                id=cid, title=title, description=f"{title} for high school students.",
                teacher_id=teacher_id, teacher=teacher_names.get(teacher_id, ""),
                price=price, subject=subject, level=level, duration=duration,
                total_lessons=lessons, enrolled_students=enrolled, rating=rating,
                review_count=reviews, status="active", created_at=created, updated_at=updated,
                thumbnail=f"/placeholder.svg?height=200&width=300&text={title.replace(' ', '+')}",
            ))

        for sec in DEMO_SECTIONS:
            store.sections.append(CourseSection(
                id=sec["id"], course_id=sec["course_id"], title=sec["title"],
                description=sec["description"], order=sec["order"],
                lessons=[
                    Lesson(id=lid, course_id=sec["course_id"], section_id=sec["id"], title=title,
                           description=desc, type=ltype, duration=duration, order=order,
                           is_preview=preview)
                    for lid, title, desc, ltype, duration, order, preview in sec["lessons"]
                ],
            ))

        for enrollment in DEMO_ENROLLMENTS:
            store.enrollments.append(replace(enrollment, completed_lessons=list(enrollment.completed_lessons)))

        for pid, student, course, amount, status, method, txn, created, completed, fees in DEMO_PAYMENTS:
            payment = Payment(
                id=pid, student_id=student, course_id=course, amount=amount, status=status,
                payment_method=method, transaction_id=txn, created_at=created,
                completed_at=completed, processing_fee=fees[0], gateway_fee=fees[1],
                platform_fee=fees[2], net_amount=fees[3],
            )
            if pid in DEMO_REFUNDS:
                payment.refunded_at, payment.refund_amount, payment.refund_reason = DEMO_REFUNDS[pid]
            store.payments.append(payment)

        for mid, name, mtype, size, url, uploaded, downloads, premium in DEMO_MATERIALS:
            store.materials.append(CourseMaterial(
                id=mid, course_id="1", name=name, type=mtype, size=size, url=url,
                uploaded_at=uploaded, download_count=downloads, is_premium=premium,
            ))

        for mid, sender, receiver, content, sent, read in DEMO_MESSAGES:
            store.messages.append(Message(
                id=mid, sender_id=sender, receiver_id=receiver, course_id="1",
                content=content, sent_at=sent, read_at=read,
            ))

        for review in DEMO_REVIEWS:
            store.reviews.append(replace(review, pros=list(review.pros), cons=list(review.cons)))

    return store.counts()
