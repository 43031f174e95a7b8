DEFAULT_DURATION = 60

# Bookable start times, same for every day
SLOT_CATALOG = (
    "10:00", "10:30", "11:00", "11:30",
    "12:00", "12:30", "13:00", "13:30",
    "14:00", "14:30", "15:00", "15:30",
    "16:00", "16:30", "17:00",
)

SERVICES = {
    "classic": {
        "name": "Classic Manicure",
        "price": 35,
        "duration": 45,
        "description": "Shaping, cuticle care, hand massage and a regular polish finish."
    },
    "gel": {
        "name": "Gel Manicure",
        "price": 50,
        "duration": 60,
        "description": "Long-wear gel polish cured under LED. "
                       "Includes shaping, cuticle care and a glossy top coat."
    },
    "acrylic": {
        "name": "Acrylic Full Set",
        "price": 75,
        "duration": 90,
        "description": "Full set of acrylic extensions, shaped to length. "
                       "Finished with gel polish of your choice."
    },
    "fill": {
        "name": "Acrylic Fill",
        "price": 55,
        "duration": 60,
        "description": "Rebalance and infill of existing acrylic or builder gel."
    },
    "pedicure": {
        "name": "Luxury Pedicure",
        "price": 60,
        "duration": 60,
        "description": "Soak, exfoliation, callus care, massage and polish."
    },
    "nail_art": {
        "name": "Nail Art",
        "price": 20,
        "duration": 30,
        "description": "Hand-painted designs, chrome, foils or gems on top of any service."
    }
}


def get_service_name(service: str) -> str:
    return SERVICES.get(service, {"name": service})["name"]


def get_service_duration(service: str) -> int:
    """Duration in minutes; unknown services get DEFAULT_DURATION."""
    return SERVICES.get(service, {}).get("duration", DEFAULT_DURATION)
