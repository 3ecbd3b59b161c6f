"""
Application entry point.

Usage:
    python run.py

Starts the Flask development server on http://localhost:5000.
Submissions go to ONBOARDING_ENDPOINT (default https://reqres.in/api/users).
"""

from onboarding import create_app

app = create_app()

if __name__ == '__main__':
    print('\n  User Onboarding Form')
    print('  ====================')
    print(f"  Submitting to: {app.config['ONBOARDING_ENDPOINT']}")
    print('  URL: http://localhost:5000\n')

    app.run(
        host='127.0.0.1',
        port=5000,
        debug=True,
    )
