from __future__ import annotations

from app.application.utils.date_parser import describe_opening_hours, format_date, format_time
from app.domain.entities.booking_state import BookingFields, BookingStep
from app.domain.entities.reservation import ReservationRecord


DATE_EXAMPLES = "for example \"March 15\", \"15 March\" or \"3/15\""
TIME_EXAMPLES = "for example \"7pm\", \"7:30 p.m.\" or \"19:30\""
HOURS_SUMMARY = "Monday to Friday 11:30 AM to 10:00 PM, Saturday and Sunday 11:00 AM to 11:00 PM"


class ReplyComposer:
    def __init__(self, restaurant_name: str, max_party_size: int = 8, restaurant_phone: str | None = None) -> None:
        self._restaurant_name = restaurant_name
        self._max_party_size = max_party_size
        self._restaurant_phone = restaurant_phone

    def start(self) -> str:
        return (
            f"I'd be happy to help you book a table at {self._restaurant_name}! "
            "First, may I have your name?"
        )

    def ask(self, step: BookingStep, fields: BookingFields) -> str:
        """Question for the step that is about to be collected."""
        if step == BookingStep.NAME:
            return "May I have your name for the reservation?"
        if step == BookingStep.EMAIL:
            return "What email address should we send the confirmation to?"
        if step == BookingStep.PHONE:
            return "What phone number can we reach you at?"
        if step == BookingStep.DATE:
            return f"What date would you like to come in? ({DATE_EXAMPLES})"
        if step == BookingStep.TIME:
            if fields.date is not None:
                return (
                    f"What time would you like on {format_date(fields.date)}? "
                    f"We take reservations from {describe_opening_hours(fields.date)} that day."
                )
            return f"What time would you like? ({TIME_EXAMPLES})"
        if step == BookingStep.DATETIME:
            if fields.date is not None:
                return self.ask(BookingStep.TIME, fields)
            if fields.time is not None:
                return f"Which date would you like that {format_time(fields.time)} table? ({DATE_EXAMPLES})"
            return "What date and time would you like? (for example \"March 15 at 7pm\")"
        if step == BookingStep.PARTY_SIZE:
            return f"How many people will be in your party? We can seat 1 to {self._max_party_size} guests."
        if step == BookingStep.SPECIAL_REQUESTS:
            return "Do you have any special requests, like dietary needs or seating preferences? Reply \"none\" if not."
        return self.summary(fields)

    def captured(
        self,
        step: BookingStep,
        fields: BookingFields,
        next_step: BookingStep,
        reason: str | None = None,
    ) -> str:
        """Echo what was just stored, then ask for whatever comes next."""
        echo = self._echo(step, fields)
        question = self.retry(next_step, fields, reason) if reason else self.ask(next_step, fields)
        return f"{echo} {question}" if echo else question

    def _echo(self, step: BookingStep, fields: BookingFields) -> str:
        if step == BookingStep.NAME and fields.name:
            return f"Nice to meet you, {fields.name}!"
        if step == BookingStep.EMAIL and fields.email:
            return f"Thanks, I've got {fields.email}."
        if step == BookingStep.PHONE and fields.phone:
            return f"Got it, {fields.phone}."
        if step in (BookingStep.DATE, BookingStep.TIME, BookingStep.DATETIME):
            if fields.date is not None and fields.time is not None:
                return f"Great, {format_date(fields.date)} at {format_time(fields.time)}."
            if fields.date is not None:
                return f"Great, {format_date(fields.date)}."
            if fields.time is not None:
                return f"Great, {format_time(fields.time)}."
        if step == BookingStep.PARTY_SIZE and fields.party_size:
            guests = "guest" if fields.party_size == 1 else "guests"
            return f"A table for {fields.party_size} {guests}."
        if step == BookingStep.SPECIAL_REQUESTS:
            return "Noted." if fields.special_requests else ""
        return ""

    def retry(self, step: BookingStep, fields: BookingFields, reason: str | None = None) -> str:
        """Re-prompt after an utterance that did not yield a valid value."""
        if reason == "past_date":
            return f"That date has already passed. {self.ask(BookingStep.DATE, fields)}"
        if reason == "past_time":
            return f"That time has already passed. {self.ask(BookingStep.TIME, fields)}"
        if reason == "closed":
            if fields.date is not None:
                return (
                    f"Sorry, we don't take reservations at that time on {format_date(fields.date)}. "
                    f"Please pick a time between {describe_opening_hours(fields.date)}."
                )
            return f"Sorry, that's outside our opening hours ({HOURS_SUMMARY}). What time would you like?"
        if reason == "party_size_limit":
            return (
                f"I'm sorry, we can only accommodate parties of 1 to {self._max_party_size} people. "
                "How many people will be joining?"
            )
        if reason == "time_cleared" and fields.date is not None:
            return (
                f"Heads up: your earlier time is outside our hours on {format_date(fields.date)}. "
                f"We take reservations from {describe_opening_hours(fields.date)} that day. What time would you like?"
            )

        if step == BookingStep.NAME:
            return "Sorry, I didn't catch your name. Could you tell me your name (e.g. \"My name is Ana Lopez\")?"
        if step == BookingStep.EMAIL:
            return "That doesn't look like a valid email address. Please enter one like name@example.com."
        if step == BookingStep.PHONE:
            return "Please enter a phone number with at least 7 digits."
        if step == BookingStep.DATE:
            return f"Sorry, I couldn't understand that date. Please give a date {DATE_EXAMPLES}."
        if step == BookingStep.TIME:
            return f"Sorry, I couldn't understand that time. Please give a time {TIME_EXAMPLES}."
        if step == BookingStep.DATETIME:
            return f"Sorry, I couldn't understand that. {self.ask(step, fields)}"
        if step == BookingStep.PARTY_SIZE:
            return f"How many people should I reserve for? Please reply with a number from 1 to {self._max_party_size}."
        if step == BookingStep.SPECIAL_REQUESTS:
            return "Please tell me any special requests, or reply \"none\"."
        return self.ask_what_to_change()

    def summary(self, fields: BookingFields) -> str:
        lines = ["Please review your reservation:"]
        lines.append(f"- Name: {fields.name}")
        lines.append(f"- Email: {fields.email}")
        if fields.phone:
            lines.append(f"- Phone: {fields.phone}")
        if fields.date is not None:
            lines.append(f"- Date: {format_date(fields.date)}")
        if fields.time is not None:
            lines.append(f"- Time: {format_time(fields.time)}")
        lines.append(f"- Party size: {fields.party_size}")
        lines.append(f"- Special requests: {fields.special_requests or 'None'}")
        lines.append("Reply \"yes\" to confirm, or tell me what you'd like to change (name, email, date, time, party size or special requests).")
        return "\n".join(lines)

    def ask_what_to_change(self) -> str:
        return (
            "Which detail would you like to change: name, email, date, time, party size or special requests? "
            "Or reply \"yes\" to confirm."
        )

    def change(self, step: BookingStep, fields: BookingFields) -> str:
        return f"No problem, let's update that. {self.ask(step, fields)}"

    def booked(self, record: ReservationRecord, reservation_id: str) -> str:
        guests = "guest" if record.party_size == 1 else "guests"
        return (
            f"Your table is booked, {record.name}! We'll see you on {format_date(record.start.date())} "
            f"at {format_time(record.start.time())} for {record.party_size} {guests}. "
            f"Your confirmation number is {reservation_id}. A confirmation will be sent to {record.email}."
        )

    def unavailable(self, step: BookingStep) -> str:
        what = "date and time" if step == BookingStep.DATETIME else "date"
        return f"I'm sorry, that time slot is already booked. What other {what} would you like?"

    def finalize_error(self) -> str:
        call_us = f" or call us at {self._restaurant_phone}" if self._restaurant_phone else " or call us directly"
        return (
            "I'm sorry, I couldn't complete your reservation right now. "
            f"Please reply \"yes\" to try again in a moment{call_us}."
        )

    def abandoned(self) -> str:
        return "No problem, I've discarded that reservation. Let me know if you'd like to start a new one."

    def cancelled(self, in_progress: bool) -> str:
        if in_progress:
            return "Okay, I've cancelled the reservation in progress. Is there anything else I can help you with?"
        return "Okay, nothing is in progress. How can I help you?"

    def missing_details(self) -> str:
        return (
            "I need a few more details to complete your reservation. Please provide your full name, "
            "email address, preferred date and time, and the number of people in your party."
        )

    def apology(self) -> str:
        return "I'm sorry, something went wrong on our side. Please try again in a moment."
