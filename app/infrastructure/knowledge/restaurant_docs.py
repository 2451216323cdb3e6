RESTAURANT_DOCS: dict[str, list[dict[str, str]]] = {
    "restaurant": [
        {
            "id": "restaurant_info",
            "text": (
                "Ristorante Bella Vista is a family-run Italian restaurant serving regional dishes "
                "from Tuscany and Campania, with fresh pasta made in house every morning."
            ),
        },
        {
            "id": "restaurant_hours",
            "text": (
                "Opening hours: Monday to Friday 11:30 AM to 10:00 PM, Saturday and Sunday "
                "11:00 AM to 11:00 PM. Reservations are accepted for any time within opening hours."
            ),
        },
        {
            "id": "restaurant_location",
            "text": (
                "We are located at 123 Main Street, downtown, two blocks from Central Station. "
                "Street parking is available and there is a public garage across the street."
            ),
        },
        {
            "id": "restaurant_reservations",
            "text": (
                "Reservations can be made for parties of 1 to 8 guests and hold the table for two hours. "
                "For larger groups or private events please call the restaurant."
            ),
        },
        {
            "id": "restaurant_dietary",
            "text": (
                "Vegetarian, vegan and gluten-free options are available. Please mention any allergies "
                "as a special request when booking so the kitchen can prepare."
            ),
        },
    ],
    "menu": [
        {
            "id": "menu_bruschetta",
            "text": "Bruschetta al Pomodoro ($9): grilled bread with tomatoes, garlic, basil and olive oil. Vegan.",
        },
        {
            "id": "menu_margherita",
            "text": "Pizza Margherita ($16): San Marzano tomato, fior di latte mozzarella and basil from our wood-fired oven.",
        },
        {
            "id": "menu_carbonara",
            "text": "Spaghetti alla Carbonara ($19): guanciale, egg yolk, pecorino romano and black pepper.",
        },
        {
            "id": "menu_risotto",
            "text": "Risotto ai Funghi ($21): carnaroli rice with wild mushrooms and parmigiano. Vegetarian and gluten-free.",
        },
        {
            "id": "menu_osso_buco",
            "text": "Osso Buco ($32): braised veal shank with gremolata, served with saffron risotto.",
        },
        {
            "id": "menu_tiramisu",
            "text": "Tiramisu ($10): espresso-soaked ladyfingers layered with mascarpone cream and cocoa.",
        },
        {
            "id": "menu_wine",
            "text": "Wine list: Chianti Classico ($12 glass), Pinot Grigio ($11 glass) and a rotating selection of Italian reds by the bottle.",
        },
    ],
}
