# ---------- PROMPTS ----------

IDENTIFY_PROMPT = (
    "Identify this plant. Provide the common name, scientific name, a brief description, "
    "detailed care instructions (light, water, soil, toxicity), and a fun fact."
)

PLANT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "commonName": {"type": "STRING"},
        "scientificName": {"type": "STRING"},
        "description": {"type": "STRING"},
        "care": {
            "type": "OBJECT",
            "properties": {
                "light": {"type": "STRING"},
                "water": {"type": "STRING"},
                "soil": {"type": "STRING"},
                "toxicity": {"type": "STRING"},
            },
            "required": ["light", "water", "soil", "toxicity"],
        },
        "funFact": {"type": "STRING"},
    },
    "required": ["commonName", "scientificName", "description", "care", "funFact"],
}

CLASSIFICATION_FAILED_MESSAGE = "Could not identify the plant. Please try another clear photo."

CHAT_UNAVAILABLE_REPLY = "I'm having trouble connecting to my botanical database right now."
CHAT_EMPTY_REPLY = "I'm sorry, I didn't catch that. Could you try asking again?"


def get_chat_system_message(record) -> str:
    care = record.care
    return (
        "You are an expert botanist and gardening assistant.\n"
        "The user is asking about a specific plant they just identified:\n"
        f"Name: {record.common_name} ({record.scientific_name}).\n"
        f"Description: {record.description}\n"
        f"Care Info: Light - {care.light}, Water - {care.water}, Soil - {care.soil}.\n\n"
        "Answer questions helpfully, concisely, and with a friendly, encouraging tone.\n"
        "Focus on practical advice for keeping the plant healthy."
    )


def get_greeting(record) -> str:
    return (
        f"Hello! I see you've found a {record.common_name}. It looks beautiful! "
        "How can I help you care for it today?"
    )
