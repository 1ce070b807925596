from fastapi import HTTPException, status


class RoomException(HTTPException):
    code = "room_error"

    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class RoomNotFound(RoomException):
    code = "room_not_found"

    def __init__(self):
        super().__init__("Room not found", status.HTTP_404_NOT_FOUND)


class UserNotFound(RoomException):
    code = "user_not_found"

    def __init__(self):
        super().__init__("User not found", status.HTTP_404_NOT_FOUND)


class NotParticipating(RoomException):
    code = "not_participating"

    def __init__(self):
        super().__init__("User not a participant in this room", status.HTTP_404_NOT_FOUND)


class RoomExpired(RoomException):
    code = "room_expired"

    def __init__(self):
        super().__init__("Room has expired", status.HTTP_409_CONFLICT)


class DuplicateSolve(RoomException):
    code = "duplicate_solve"

    def __init__(self):
        super().__init__("Solve already submitted for this position", status.HTTP_409_CONFLICT)


class InvalidSolveNumber(RoomException):
    code = "invalid_solve_number"

    def __init__(self, solve_number: int, total_solves: int):
        super().__init__(f"Solve number must be between 1 and {total_solves} (got {solve_number})")


class UnauthorizedAction(RoomException):
    code = "unauthorized"

    def __init__(self, action: str = "edit this room"):
        super().__init__(f"Only the room creator can {action}", status.HTTP_403_FORBIDDEN)


class RoomCodeUnavailable(RoomException):
    code = "room_code_unavailable"

    def __init__(self):
        super().__init__("Could not generate a unique room code", status.HTTP_503_SERVICE_UNAVAILABLE)


class TimerSessionNotFound(RoomException):
    code = "timer_session_not_found"

    def __init__(self):
        super().__init__("Timer session not found", status.HTTP_404_NOT_FOUND)


class TimerSolveNotFound(RoomException):
    code = "timer_solve_not_found"

    def __init__(self):
        super().__init__("Solve not found", status.HTTP_404_NOT_FOUND)


class ContactMessageNotFound(RoomException):
    code = "contact_message_not_found"

    def __init__(self):
        super().__init__("Message not found", status.HTTP_404_NOT_FOUND)
