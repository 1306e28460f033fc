"""User-facing copy for authentication flows and error popups.

Each entry is a `{"title": ..., "message": ...}` pair so it can be handed
straight to the toast collaborator.
"""

AUTH_MESSAGES = {
    "login": {
        "invalid_credentials": {
            "title": "Login Failed",
            "message": "Incorrect email or password. Please try again.",
        },
        "empty_fields": {
            "title": "Fields Required",
            "message": "Please enter both email and password.",
        },
        "user_not_found": {
            "title": "Account Not Found",
            "message": "No account found with this email. Please register first.",
        },
        "account_locked": {
            "title": "Account Locked",
            "message": "Your account has been temporarily locked due to multiple failed attempts.",
        },
        "account_suspended": {
            "title": "Account Suspended",
            "message": "Your account has been suspended. Please contact support.",
        },
        "too_many_attempts": {
            "title": "Too Many Attempts",
            "message": "Too many login attempts. Please try again later.",
        },
        "server_error": {
            "title": "Connection Error",
            "message": "Unable to connect to the server. Please try again later.",
        },
        "success": {
            "title": "Login Successful",
            "message": "Welcome back! You have successfully logged in.",
        },
        "admin_success": {
            "title": "Admin Login Successful",
            "message": "Welcome to the admin panel. You have successfully logged in.",
        },
    },
    "register": {
        "email_exists": {
            "title": "Email Already Registered",
            "message": "An account with this email already exists. Please use a different email.",
        },
        "password_too_short": {
            "title": "Password Too Short",
            "message": "Password must be at least 8 characters long.",
        },
        "password_mismatch": {
            "title": "Passwords Don't Match",
            "message": "The passwords you entered don't match. Please try again.",
        },
        "invalid_email": {
            "title": "Invalid Email",
            "message": "Please enter a valid email address.",
        },
        "name_required": {
            "title": "Name Required",
            "message": "Please enter your full name to continue.",
        },
        "email_required": {
            "title": "Email Required",
            "message": "Please enter your email address to continue.",
        },
        "password_required": {
            "title": "Password Required",
            "message": "Please create a password for your account.",
        },
        "terms_required": {
            "title": "Terms Agreement Required",
            "message": "Please agree to the Terms and Conditions to create an account.",
        },
        "success": {
            "title": "Registration Successful",
            "message": "Your account has been created successfully!",
        },
    },
    "session": {
        "expired": {
            "title": "Session Expired",
            "message": "Your session has expired. Please log in again.",
        },
        "logout_success": {
            "title": "Logged Out",
            "message": "You have been successfully logged out.",
        },
    },
}

ERROR_MESSAGES = {
    "auth": {
        "invalid_credentials": {
            "title": "Login Failed",
            "message": "The email or password you entered is incorrect. Please try again or reset your password.",
        },
        "account_not_found": {
            "title": "Account Not Found",
            "message": "We couldn't find an account with that email address. Please check your email or create a new account.",
        },
        "account_exists": {
            "title": "Account Already Exists",
            "message": "An account with this email already exists. Please log in or use a different email address.",
        },
        "email_not_verified": {
            "title": "Email Not Verified",
            "message": "Please verify your email address before logging in. Check your inbox for a verification link.",
        },
    },
    "network": {
        "connection_error": {
            "title": "Connection Error",
            "message": "We're having trouble connecting to our servers. Please check your internet connection and try again.",
        },
    },
    "generic": {
        "unknown_error": {
            "title": "Something Went Wrong",
            "message": "An unexpected error occurred. Please try again or contact support if the problem persists.",
        },
        "permission_denied": {
            "title": "Permission Denied",
            "message": "You don't have permission to perform this action.",
        },
    },
}
