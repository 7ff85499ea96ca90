"""AI content generation for study material: explanations, quizzes,
flashcards, interview questions and topic-scoped chat."""

__version__ = "0.1.0"
