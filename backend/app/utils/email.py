"""
Email notifications for workers (new reviews, welcome)
"""

import html
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from ..config import settings
from ..core.logging import get_logger
from .profile import profile_url

logger = get_logger(__name__)


def rating_stars(rating: int) -> str:
    return "★" * rating + "☆" * (5 - rating)


def _send_email(to_email: str, subject: str, html_body: str) -> bool:
    """
    Deliver one HTML email over SMTP

    Returns:
        True if email sent successfully, False otherwise. Never raises.
    """
    try:
        smtp_host = settings.smtp_host or 'smtp.gmail.com'
        smtp_port = settings.smtp_port or 587
        smtp_user = settings.smtp_user
        smtp_password = settings.smtp_password
        smtp_from_email = settings.smtp_from_email or smtp_user

        # If SMTP is not configured, log and return False
        if not smtp_user or not smtp_password:
            logger.warning(f"SMTP not configured. Email '{subject}' to {to_email} was not sent")
            return False

        msg = MIMEMultipart()
        msg['From'] = f"{settings.app_name} <{smtp_from_email}>"
        msg['To'] = to_email
        msg['Subject'] = subject
        msg.attach(MIMEText(html_body, 'html'))

        try:
            with smtplib.SMTP(smtp_host, smtp_port) as server:
                server.starttls()
                server.login(smtp_user, smtp_password)
                server.send_message(msg)

            logger.info(f"Email '{subject}' sent successfully to {to_email}")
            return True
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed for {smtp_user}: {str(e)}")
            raise
        except smtplib.SMTPException as e:
            logger.error(f"SMTP error while sending email to {to_email}: {str(e)}")
            raise

    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {str(e)}", exc_info=True)
        return False


def send_new_review_email(
    worker_email: str,
    worker_name: str,
    rating: int,
    worker_slug: str,
    reviewer_name: Optional[str] = None,
    comment: Optional[str] = None,
) -> bool:
    """
    Tell a worker they received a review

    Args:
        worker_email: Recipient address
        worker_name: Worker display name
        rating: Stars given (1-5)
        worker_slug: Used to link the public profile
        reviewer_name: Optional name the customer left
        comment: Optional review text

    Returns:
        True if email sent successfully, False otherwise
    """
    stars = rating_stars(rating)
    reviewer = reviewer_name or "A customer"
    dashboard_url = f"{settings.app_url}/dashboard/reviews"
    public_url = profile_url(worker_slug)
    # Customer text is untrusted and goes into an HTML body
    comment_html = f'<p style="font-style: italic;">"{html.escape(comment)}"</p>' if comment else ""

    body = f"""
    <html>
      <body>
        <h2>New review, {html.escape(worker_name)}!</h2>
        <p>{html.escape(reviewer)} left you a review.</p>
        <p style="font-size: 28px; color: #f59e0b;">{stars}</p>
        <p><strong>{rating} out of 5 stars</strong></p>
        {comment_html}
        <p><a href="{dashboard_url}">View your reviews</a></p>
        <hr>
        <p style="color: #666; font-size: 12px;">
          {settings.app_name} - Your reputation travels with you.<br>
          <a href="{public_url}">View your public profile</a>
        </p>
      </body>
    </html>
    """

    return _send_email(worker_email, f"{stars} New {rating}-star review from {reviewer}", body)


def send_welcome_email(email: str, display_name: str, worker_slug: str) -> bool:
    """Greet a worker right after their profile is created"""
    public_url = profile_url(worker_slug)
    dashboard_url = f"{settings.app_url}/dashboard"

    body = f"""
    <html>
      <body>
        <h2>Welcome, {html.escape(display_name)}!</h2>
        <p>Your professional reputation now belongs to you, not your employer.</p>
        <ol>
          <li><strong>Download your QR code</strong> from your dashboard</li>
          <li><strong>Display it</strong> at your workspace or on your badge</li>
          <li><strong>Watch reviews roll in</strong> and build your reputation</li>
        </ol>
        <p><a href="{dashboard_url}">Go to Dashboard</a> | <a href="{public_url}">View My Profile</a></p>
        <hr>
        <p style="color: #666; font-size: 12px;">{settings.app_name} Team</p>
      </body>
    </html>
    """

    return _send_email(email, f"Welcome to {settings.app_name}, {display_name}! Your reputation starts now.", body)
