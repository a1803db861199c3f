class LeagueError(Exception):
    """Base for all league application errors."""


# --- Validation (user-correctable, raised before any write) ---

class LeagueValidationError(LeagueError):
    """Input the admin can fix and resubmit."""


class MissingRoundDateError(LeagueValidationError):
    def __init__(self):
        super().__init__("Round date is required")


class EmptyAttendeesError(LeagueValidationError):
    def __init__(self):
        super().__init__("Select at least one attendee")


class InvalidStrokeCountError(LeagueValidationError):
    def __init__(self, member_id: int, strokes):
        super().__init__(f"Stroke count for member {member_id} must be a positive integer, got {strokes!r}")
        self.member_id = member_id


class DuplicateAwardWinnerError(LeagueValidationError):
    def __init__(self, winner_name: str):
        super().__init__(f"'{winner_name}' already has an award this round")
        self.winner_name = winner_name


class UnknownAwardWinnerError(LeagueValidationError):
    def __init__(self, winner_name: str):
        super().__init__(f"Award winner '{winner_name}' is not an attendee of this round")
        self.winner_name = winner_name


class InvalidMemberUpdateError(LeagueValidationError):
    """Member fields failed validation."""


class NotAnAttendeeError(LeagueValidationError):
    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} is not selected for this round")
        self.member_id = member_id


class UnknownMemberError(LeagueValidationError):
    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} does not exist")
        self.member_id = member_id


class UnknownRoundError(LeagueValidationError):
    def __init__(self, round_id: int):
        super().__init__(f"Round {round_id} does not exist")
        self.round_id = round_id


class InvalidExpenseError(LeagueValidationError):
    """Expense line item failed validation."""


# --- Collaborator failures (storage or network) ---

class CollaboratorError(LeagueError):
    """The storage collaborator failed. Input is preserved for a retry."""


class StoreReadError(CollaboratorError):
    """Snapshot read failed; the last good snapshot is kept."""


class StoreWriteError(CollaboratorError):
    """A write failed; local state was rolled back."""
