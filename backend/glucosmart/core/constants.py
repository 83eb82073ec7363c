"""
Central location for constant values used across the application.
"""

# Bolus suggestion defaults, applied only when the field is absent from the request.
DEFAULT_CARB_RATIO = 10  # g/U
DEFAULT_SENSITIVITY_FACTOR = 50  # mg/dL/U
DEFAULT_TARGET_GLUCOSE = 100  # mg/dL

# Validation order is also the order errors are reported in.
BOLUS_FIELDS = ("carbs", "current_glucose", "carb_ratio", "sensitivity_factor", "target_glucose")

BOLUS_FIELD_MESSAGES = {
    "carbs": "Los carbohidratos deben ser un número positivo.",
    "current_glucose": "La glucosa actual debe ser un número positivo.",
    "carb_ratio": "El ratio de carbohidratos debe ser un número positivo.",
    "sensitivity_factor": "El factor de sensibilidad debe ser un número positivo.",
    "target_glucose": "La glucosa objetivo debe ser un número positivo.",
}

SHARE_LINKS_FILENAME = "share_links.json"
