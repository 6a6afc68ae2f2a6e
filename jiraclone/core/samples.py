"""
FILE: jiraclone/core/samples.py
PURPOSE: Demo projects created on first launch
EXPORTS:
  - SAMPLE_PROJECTS: Demo data (project name -> tickets)
  - seed_sample_data(board) -> List[Project]
NOTES:
  - Only seeds an empty board
  - Goes through the regular board operations, so the store and any
    listeners see the same events as for user actions
"""

from typing import List

from .constants import Status, Priority
from .models import Project

# (title, description, status, priority, [(instruction, completed), ...])
SAMPLE_PROJECTS = {
    "E-commerce Website": [
        (
            "Payment integration",
            "Integrate the Stripe payment gateway",
            Status.BACKLOG,
            Priority.HIGH,
            [
                ("Create a Stripe developer account", True),
                ("Generate the API keys", True),
                ("Integrate the Stripe SDK", False),
                ("Implement the checkout flow", False),
            ],
        ),
        (
            "Product page",
            "Build the product detail page with an image gallery",
            Status.TODO,
            Priority.MEDIUM,
            [
                ("Mock up the page", True),
                ("Build the image gallery", False),
                ("Implement the variant picker", False),
            ],
        ),
        (
            "SEO optimisation",
            "Improve search ranking of the main pages",
            Status.TO_TEST,
            Priority.LOW,
            [],
        ),
        (
            "Fix cart bug",
            "Quantities are not updated in the cart",
            Status.DONE,
            Priority.CRITICAL,
            [],
        ),
    ],
    "Mobile App": [
        (
            "Touch ID login",
            "Add biometric authentication",
            Status.BACKLOG,
            Priority.HIGH,
            [
                ("Add the permissions to Info.plist", True),
                ("Implement the authentication method", False),
                ("Handle error cases", False),
            ],
        ),
        (
            "Offline mode",
            "Allow using the app without an internet connection",
            Status.TODO,
            Priority.MEDIUM,
            [],
        ),
        (
            "Push notifications",
            "Configure notifications for new messages",
            Status.TO_TEST,
            Priority.MEDIUM,
            [],
        ),
    ],
}


def seed_sample_data(board) -> List[Project]:
    """
    Fill an empty board with the demo projects.

    Returns:
        The created projects (empty list if the board already had projects)
    """
    if board.projects:
        return []

    created = []
    for name, tickets in SAMPLE_PROJECTS.items():
        project = board.create_project(name)
        for title, description, status, priority, steps in tickets:
            ticket = board.create_ticket(
                project,
                title,
                description,
                status=status,
                priority=priority,
                instruction_texts=[text for text, _ in steps],
            )
            for instruction, (_, done) in zip(list(ticket.instructions), steps):
                if done:
                    board.toggle_instruction(instruction)
        created.append(project)
    return created
