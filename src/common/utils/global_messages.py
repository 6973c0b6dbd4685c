class GlobalMessages:
    # Leaderboard Messages
    NO_RECORD_FOUND = "No record found for {username}"
    BACKING_STORE_UNAVAILABLE = "Leaderboard backing store is unavailable. Please retry."
    STORE_NOT_INITIALISED = "Leaderboard store is not initialised"

    # Health Messages
    API_RUNNING = "API is running"
