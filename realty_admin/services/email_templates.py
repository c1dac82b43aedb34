"""
Built-in transactional email templates.

Placeholders use the ``{{variable}}`` syntax and are filled by
``render_template``. Unknown placeholders are left as-is.
"""

EMAIL_TEMPLATES = {
    'welcome': {
        'subject': 'Welcome to Real Estate Platform',
        'body': (
            "Hi {{name}},\n\n"
            "Your account has been created. You can now sign in with {{email}}.\n\n"
            "Best regards,\nReal Estate Team"
        ),
        'html': (
            "<h1>Welcome {{name}}!</h1>"
            "<p>Your account has been created. You can now sign in with {{email}}.</p>"
            "<p>Best regards,<br>Real Estate Team</p>"
        ),
    },
    'password_reset': {
        'subject': 'Password Reset Request',
        'body': (
            "Hi {{name}},\n\n"
            "You requested a password reset. Use this token to set a new password:\n\n"
            "{{reset_token}}\n\n"
            "The token expires in {{expires_minutes}} minutes. "
            "If you did not request this, please ignore this email.\n\n"
            "Best regards,\nReal Estate Team"
        ),
        'html': (
            "<h1>Password Reset</h1>"
            "<p>Hi {{name}},</p>"
            "<p>You requested a password reset. Use this token to set a new password:</p>"
            "<p><strong>{{reset_token}}</strong></p>"
            "<p>The token expires in {{expires_minutes}} minutes.</p>"
        ),
    },
    'property_approved': {
        'subject': 'Property Approved',
        'body': (
            "Hi {{name}},\n\n"
            "Your property \"{{property_title}}\" has been approved and is now live.\n\n"
            "Best regards,\nReal Estate Team"
        ),
        'html': (
            "<h1>Property Approved</h1>"
            "<p>Hi {{name}},</p>"
            "<p>Your property \"{{property_title}}\" has been approved and is now live.</p>"
        ),
    },
    'property_rejected': {
        'subject': 'Property Verification Update',
        'body': (
            "Hi {{name}},\n\n"
            "Your property \"{{property_title}}\" could not be approved.\n"
            "Reason: {{reason}}\n\n"
            "Please update the listing and submit it again.\n\n"
            "Best regards,\nReal Estate Team"
        ),
        'html': (
            "<h1>Property Verification Update</h1>"
            "<p>Hi {{name}},</p>"
            "<p>Your property \"{{property_title}}\" could not be approved.</p>"
            "<p>Reason: {{reason}}</p>"
        ),
    },
}


def render_template(text, variables):
    """Replace {{variable}} placeholders with actual values."""
    if not text:
        return text

    result = text
    for var_name, var_value in variables.items():
        placeholder = f'{{{{{var_name}}}}}'
        result = result.replace(placeholder, str(var_value))

    return result


def render_email(template_name, variables):
    """Return (subject, text body, html body) for a named template."""
    template = EMAIL_TEMPLATES.get(template_name)
    if template is None:
        raise ValueError(f"Unknown email template: {template_name}")
    return (
        render_template(template['subject'], variables),
        render_template(template['body'], variables),
        render_template(template['html'], variables),
    )
