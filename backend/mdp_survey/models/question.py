from __future__ import annotations

from dataclasses import dataclass

JOB_KNOWLEDGE = "Job Knowledge"
QUALITY_OF_WORK = "Quality of Work"
COMMUNICATION = "Communication Skills & Teamwork"
INITIATIVE = "Initiative & Productivity"

# Canonical order; extrema tie-breaks depend on it.
ASSESSMENT_AREAS: tuple[str, ...] = (
    JOB_KNOWLEDGE,
    QUALITY_OF_WORK,
    COMMUNICATION,
    INITIATIVE,
)

AREA_WEIGHTS: dict[str, float] = {
    JOB_KNOWLEDGE: 0.50,
    QUALITY_OF_WORK: 0.20,
    COMMUNICATION: 0.15,
    INITIATIVE: 0.15,
}

# Record field that stores each area score.
AREA_FIELDS: dict[str, str] = {
    JOB_KNOWLEDGE: "jobKnowledge",
    QUALITY_OF_WORK: "qualityOfWork",
    COMMUNICATION: "communication",
    INITIATIVE: "initiative",
}

PLANNING = "Planning"
DIGITAL_MERCH = "Digital Merch"
REPLENISHMENT = "Replenishment"
MEMBERS_MARK = "Member's Mark"

FUNCTIONS: tuple[str, ...] = (PLANNING, DIGITAL_MERCH, REPLENISHMENT, MEMBERS_MARK)

RATING_LABELS: tuple[str, ...] = (
    "Strongly Disagree",
    "Disagree",
    "Neutral",
    "Agree",
    "Strongly Agree",
)


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    area: str
    weight: float


def _shared_questions() -> list[Question]:
    return [
        Question(
            "Q5",
            "MDP produced high-quality deliverables that reflected strong attention to detail and accuracy.",
            QUALITY_OF_WORK,
            0.2,
        ),
        Question(
            "Q6",
            "MDP demonstrated problem-solving skills in their work, contributing meaningful insights "
            "or improvements to the team or their project.",
            QUALITY_OF_WORK,
            0.2,
        ),
        Question(
            "Q7",
            "MDP communicated clearly and effectively with team, stakeholders, and cross-functional "
            "partners throughout the rotation.",
            COMMUNICATION,
            0.15,
        ),
        Question(
            "Q8",
            "MDP demonstrated strong collaboration skills and contributed positively to team dynamics.",
            COMMUNICATION,
            0.15,
        ),
        Question(
            "Q9",
            "MDP consistently demonstrated initiative by proactively identifying opportunities, asking "
            "thoughtful questions, and seeking out ways to add value during the rotation.",
            INITIATIVE,
            0.15,
        ),
        Question(
            "Q10",
            "MDP maintained a high level of productivity while also effectively managing their time "
            "and responsibilities.",
            INITIATIVE,
            0.15,
        ),
    ]


def _job_knowledge(*texts: str) -> list[Question]:
    return [
        Question(f"Q{index}", text, JOB_KNOWLEDGE, 0.5)
        for index, text in enumerate(texts, start=1)
    ]


QUESTIONS_BY_FUNCTION: dict[str, tuple[Question, ...]] = {
    PLANNING: tuple(
        _job_knowledge(
            "MDP can effectively explain their category's P&L and tell a compelling business story through it.",
            "To what extent does the participant demonstrate fluency in retail math and independently "
            "access key financial metrics?",
            "MDP can navigate and apply financial planning tools (e.g., PBC, ISB Forecasting, AOP, One-Time-Buy).",
            "MDP can understand and articulate the financial impact of decisions on their category, "
            "including budget and JBP alignment.",
        )
        + _shared_questions()
    ),
    DIGITAL_MERCH: tuple(
        _job_knowledge(
            "MDP demonstrated a clear understanding of the HAVE + FIND + LOVE + BUY framework and how it "
            "supports the digital purchase funnel at Sam's Club.",
            "MDP can articulate how Digital Merchandising's strategy aligns with the broader Sam's Club "
            "strategy, particularly in accelerating the omni member experience.",
            "MDP understands and can articulate how images and content impact SEO in Google.",
            "MDP has a solid understanding of how items come to life on samsclub.com, from creation to "
            "discovery, checkout, and delivery.",
        )
        + _shared_questions()
    ),
    REPLENISHMENT: tuple(
        _job_knowledge(
            "MDP demonstrates confidence in using dashboards and reporting tools across replenishment "
            "systems to identify demand accuracy and support decision-making.",
            "MDP understands the importance of item creation and maintenance accuracy, and recognizes how "
            "errors in this process can impact club operations.",
            "MDP applies strategies to improve forecast accuracy and shows an understanding of how demand "
            "planning decisions drive seasonal and short-term sell-through.",
            "MDP demonstrates an understanding of the importance of collaboration between merchants and "
            "replenishment teams in strengthening inventory allocation and supporting club performance.",
        )
        + _shared_questions()
    ),
    MEMBERS_MARK: tuple(
        _job_knowledge(
            "MDP demonstrates a clear understanding of the Member's Mark ambition and strategy, and can "
            "articulate how it connects to the broader Sam's Club strategy.",
            "MDP demonstrated a strong understanding of the Member's Mark creative guidelines and "
            "contributed to delivering a consistent member experience through packaging and design.",
            "MDP effectively engaged with member research and sensory testing processes, showing a clear "
            "understanding of how member insights inform product development.",
            "MDP showed a solid grasp of cross-functional collaboration, including quality, sourcing, and "
            "brand line management, and how these functions align to support the Member's Mark strategy.",
        )
        + _shared_questions()
    ),
}


def questions_for(function_name: str) -> tuple[Question, ...] | None:
    return QUESTIONS_BY_FUNCTION.get(function_name)


def question_ids(function_name: str) -> list[str]:
    return [question.id for question in QUESTIONS_BY_FUNCTION.get(function_name, ())]
