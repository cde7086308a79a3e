# unihub/utils/responses.py

GREETING = (
    "Hello {user_name}! I'm your academic assistant. I can help you with information "
    "about notices, exams, calendar events, and general academic queries. "
    "How can I assist you today?"
)

PROCESSING_ERROR = (
    "I'm sorry, I encountered an error while processing your request. "
    "Please try again or contact support if the issue persists."
)

NOTICES_FOUND = "Here are the latest notices:\n\n{items}\n\nYou can view all notices in the Notice Board section."
NO_NOTICES = "There are currently no notices available. Check back later for updates!"

EXAMS_FOUND = "Here are your upcoming exams:\n\n{items}\n\nCheck the Exam Schedules section for more details."
NO_EXAMS = "No upcoming exams scheduled at the moment. Stay tuned for updates!"

EVENTS_FOUND = "Here are upcoming events:\n\n{items}\n\nView the full calendar for more details."
NO_EVENTS = "No upcoming events scheduled. Check the calendar regularly for updates!"

SEMESTER = (
    "For semester calculations and academic planning, please visit the Semester Calculator "
    "section. Only administrators can set up semester schedules, but all users can view "
    "the calculated dates."
)

PROFILE = (
    "You can update your profile information including your profile picture, contact "
    "details, and password in the Profile section."
)

HELP = """Hi {user_name}! Here's how you can use Uni-Hub:

• View your dashboard for an overview
• Check the calendar for events
• Browse notices for announcements
• View exam schedules
• Update your profile
• Use the semester calculator

As a {user_role}, you have access to all relevant sections. Is there something specific you'd like to know about?"""

GRADING = """GPA calculations are typically done based on your course grades. The grading system usually follows:
• A: 4.0 (90-100%)
• B: 3.0 (80-89%)
• C: 2.0 (70-79%)
• D: 1.0 (60-69%)
• F: 0.0 (Below 60%)

Contact your academic advisor for specific GPA calculations."""

UNIVERSITY = (
    "The University of Vavuniya is a leading institution in Northern Sri Lanka, offering "
    "diverse academic programs. This Uni-Hub system helps streamline academic activities "
    "for students, teachers, and administrators."
)

FALLBACK = """I understand you're asking about "{query}". While I specialize in academic information from your Uni-Hub system, I can help you with:

• Latest notices and announcements
• Upcoming exams and schedules
• Calendar events
• Academic procedures
• System navigation

Could you please rephrase your question or ask about any of these topics?"""
