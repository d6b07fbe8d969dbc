"""Keyword tables and thresholds for the compliance heuristics"""

SENSITIVE_DATA_TYPES = (
    "biometric",
    "health",
    "genetic",
    "political",
    "religious",
    "ethnic",
    "sexual",
)

HIGH_RISK_DATA_TYPES = (
    "location",
    "children",
    "behavioral",
    "financial",
)

# risk score >= threshold -> level
GDPR_RISK_THRESHOLDS = {
    "critical": 80,
    "high": 60,
    "medium": 30,
}

AI_PROHIBITED_PRACTICES = (
    "subliminal",
    "social scoring",
    "exploit vulnerabilities",
    "real-time biometric identification",
)

AI_HIGH_RISK_DOMAINS = (
    "biometric",
    "critical infrastructure",
    "education",
    "employment",
    "recruitment",
    "essential services",
    "law enforcement",
    "migration",
    "justice",
    "democratic",
    "healthcare",
    "safety",
    "transport",
    "energy",
    "water",
    "finance",
    "credit",
)

AI_LIMITED_RISK_USES = (
    "chatbot",
    "deepfake",
    "emotion recognition",
    "interact with humans",
)

AI_CATEGORY_RISK = {
    "unacceptable": 100,
    "high": 80,
    "limited": 40,
    "minimal": 20,
}

AI_ACT_RECOMMENDATIONS = {
    "unacceptable": ("System is prohibited under EU AI Act - discontinue development",),
    "high": (
        "Conduct conformity assessment",
        "Implement risk management system",
        "Ensure human oversight measures",
        "Prepare technical documentation",
        "CE marking required",
    ),
    "limited": (
        "Implement transparency measures",
        "Inform users about AI interaction",
        "Document system capabilities and limitations",
    ),
    "minimal": (
        "Monitor regulatory developments",
        "Consider voluntary compliance measures",
    ),
}

DEFAULT_RISK_DATA_TYPES = ("email", "user data")
