"""Email templates for UmutiSafe account notifications."""

import html
from datetime import datetime
from typing import Optional


def _get_base_styles() -> str:
    return """
    <style>
        body { margin: 0; padding: 0; font-family: Arial, Helvetica, sans-serif; line-height: 1.6; color: #333333; }
        .email-container { max-width: 600px; margin: 0 auto; background-color: #ffffff; }
        .email-header { background: linear-gradient(135deg, #0ea5e9 0%, #10b981 100%); padding: 30px 24px; text-align: center; }
        .email-header h1 { color: #ffffff; font-size: 24px; margin: 0; }
        .email-body { padding: 30px 24px; background-color: #f9f9f9; }
        .email-body h2 { font-size: 20px; margin: 0 0 16px 0; }
        .email-body p { margin: 0 0 16px 0; font-size: 15px; }
        .btn-primary { display: inline-block; background: #0ea5e9; color: #ffffff !important; padding: 12px 30px; border-radius: 5px; text-decoration: none; font-weight: 600; }
        .info-list { padding-left: 20px; margin: 16px 0; }
        .info-list li { padding: 4px 0; font-size: 14px; }
        .email-footer { padding: 20px; text-align: center; color: #666666; font-size: 12px; }
    </style>
    """


def _get_header(title: str) -> str:
    return f"""
    <div class="email-header">
        <h1>{title}</h1>
    </div>
    """


def _get_footer(year: Optional[int] = None) -> str:
    if year is None:
        year = datetime.now().year
    return f"""
    <div class="email-footer">
        <p><strong>UmutiSafe</strong> - Safe Medicine Disposal Platform</p>
        <p>This is an automated message. Please do not reply to this email.</p>
        <p>&copy; {year} UmutiSafe</p>
    </div>
    """


def _wrap(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        {_get_base_styles()}
    </head>
    <body style="background-color: #f1f5f9; padding: 24px 0;">
        <div class="email-container">
            {_get_header(title)}
            <div class="email-body">
                {body}
            </div>
            {_get_footer()}
        </div>
    </body>
    </html>
    """


def build_registration_pending_email(*, name: str) -> tuple[str, str, str]:
    """Build the "account created, waiting for approval" email.

    Returns:
        Tuple of (subject, html_body, text_body)
    """
    subject = "Welcome to UmutiSafe - Account Pending Approval"

    html_body = _wrap(
        "Welcome to UmutiSafe!",
        f"""
                <h2>Hello {html.escape(name)},</h2>
                <p>Thank you for registering with UmutiSafe, Rwanda's Safe Medicine Disposal Platform.</p>
                <p><strong>Your account has been created successfully.</strong></p>
                <p>
                    Your account is currently <strong>pending approval</strong> by our administrator.
                    You will receive another email once it has been approved.
                </p>
                <p><strong>What happens next?</strong></p>
                <ul class="info-list">
                    <li>Our admin team will review your registration</li>
                    <li>You will receive an approval email, usually within 24 hours</li>
                    <li>Once approved, you can log in and start using UmutiSafe</li>
                </ul>
                <p>Best regards,<br><strong>The UmutiSafe Team</strong></p>
        """,
    )

    text_body = f"""
Hello {name},

Thank you for registering with UmutiSafe, Rwanda's Safe Medicine Disposal Platform.

Your account is currently pending approval by our administrator.
You will receive another email once it has been approved.

What happens next?
- Our admin team will review your registration
- You will receive an approval email, usually within 24 hours
- Once approved, you can log in and start using UmutiSafe

Best regards,
The UmutiSafe Team

---
UmutiSafe - Safe Medicine Disposal Platform
    """

    return subject, html_body, text_body


def build_account_approved_email(*, name: str, email: str, login_url: str) -> tuple[str, str, str]:
    """Returns (subject, html_body, text_body) for the approval notice."""
    subject = "Your UmutiSafe Account Has Been Approved"

    html_body = _wrap(
        "Account Approved!",
        f"""
                <h2>Hello {html.escape(name)},</h2>
                <p>Great news! Your UmutiSafe account has been approved by our administrator.</p>
                <p>You can now log in and start disposing of unused medicines safely.</p>
                <div style="text-align: center; margin: 24px 0;">
                    <a href="{html.escape(login_url, quote=True)}" class="btn-primary">Login to Your Account</a>
                </div>
                <p><strong>What you can do now:</strong></p>
                <ul class="info-list">
                    <li>Scan or enter medicine information</li>
                    <li>Get disposal guidance based on risk level</li>
                    <li>Request pickup from Community Health Workers</li>
                    <li>Track your disposal history</li>
                </ul>
                <p>Log in with <strong>{html.escape(email)}</strong> and the password you chose at registration.</p>
                <p>Best regards,<br><strong>The UmutiSafe Team</strong></p>
        """,
    )

    text_body = f"""
Hello {name},

Great news! Your UmutiSafe account has been approved by our administrator.

Email: {email}
Password: the one you chose at registration

Login at: {login_url}

Best regards,
The UmutiSafe Team

---
UmutiSafe - Safe Medicine Disposal Platform
    """

    return subject, html_body, text_body
