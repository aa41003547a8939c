# File: app/db/seed.py
from datetime import datetime, timezone

def _ms(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp() * 1000)

DEMO_ISSUES = [
    {
        "id": "issue1",
        "title": "Large Pothole on Main St",
        "description": "A large pothole near the intersection of Main St and 1st Ave is causing traffic issues.",
        "type": "Road",
        "lat": 34.0522, "lng": -118.2437, "address": "Main St & 1st Ave",
        "status": "Pending",
        "reported_by_id": "citizen123",
        "reported_at": _ms(2024, 6, 10),
        "image_url": "https://picsum.photos/seed/issue1/400/300",
    },
    {
        "id": "issue2",
        "title": "Streetlight Out",
        "description": "The streetlight at Elm St park entrance is not working.",
        "type": "Streetlight",
        "lat": 34.0550, "lng": -118.2450, "address": "Elm St Park",
        "status": "InProgress",
        "reported_by_id": "citizen123",
        "reported_at": _ms(2024, 6, 15),
        "assigned_to": "Dept. of Public Works",
        "image_url": "https://picsum.photos/seed/issue2/400/300",
    },
    {
        "id": "issue3",
        "title": "Overflowing Bin",
        "description": "Public garbage bin at the bus stop on Oak Ave is overflowing.",
        "type": "Garbage",
        "lat": 34.0500, "lng": -118.2400, "address": "Oak Ave Bus Stop",
        "status": "Resolved",
        "reported_by_id": "citizen123",
        "reported_at": _ms(2024, 6, 1),
        "resolved_at": _ms(2024, 6, 3),
        "image_url": "https://picsum.photos/seed/issue3/400/300",
    },
    {
        "id": "issue4",
        "title": "Broken Park Bench",
        "description": "A bench in Central Park is broken and unsafe.",
        "type": "Park",
        "lat": 34.0600, "lng": -118.2500, "address": "Central Park",
        "status": "Pending",
        "reported_by_id": "citizen456",
        "reported_at": _ms(2024, 6, 18),
        "image_url": "https://picsum.photos/seed/issue4/400/300",
    },
    {
        "id": "issue5",
        "title": "Illegal Dumping",
        "description": "Someone dumped trash behind the old factory on Industrial Rd.",
        "type": "Other",
        "lat": 34.0400, "lng": -118.2300, "address": "Industrial Rd",
        "status": "InProgress",
        "reported_by_id": "citizen789",
        "reported_at": _ms(2024, 6, 19),
        "assigned_to": "Sanitation Dept.",
        "image_url": "https://picsum.photos/seed/issue5/400/300",
    },
    {
        "id": "issue6",
        "title": "Damaged Road Sign",
        "description": "Stop sign at Corner St & Avenue B is bent.",
        "type": "Road",
        "lat": 34.0700, "lng": -118.2600, "address": "Corner St & Avenue B",
        "status": "Pending",
        "reported_by_id": "citizen123",
        "reported_at": _ms(2024, 6, 20),
        "image_url": "https://picsum.photos/seed/issue6/400/300",
    },
]
