from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, login_required, current_user
from urllib.parse import urlparse
from checklist.data.core.user_info.user import User
from checklist.data.core.user_info.password_validator import PasswordValidator
from checklist.buisness.core.user_context import UserContext
from checklist import db, limiter
from checklist.logger import get_logger
from checklist.utils.logging_sanitizer import sanitize_exception_message, sanitize_form_data

logger = get_logger("checklist.auth")
auth = Blueprint('auth', __name__)


@auth.route('/login', methods=['GET', 'POST'])
@limiter.limit("10 per minute", methods=['POST'])
def login():
    if current_user.is_authenticated:
        logger.debug(f"User {current_user.username} already authenticated, redirecting to main")
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        username = (request.form.get('username') or '').strip()
        password = request.form.get('password')

        logger.debug(f"Login attempt for username: {username}")

        if not username or not password:
            logger.warning(f"Login attempt with missing credentials for username: {username}")
            flash('Please enter both username and password', 'error')
            return render_template('auth/login.html')

        user = User.query.filter_by(username=username).first()

        if user is None or not user.check_password(password):
            logger.warning(f"Failed login attempt for username: {username}")
            flash('Invalid username or password', 'error')
            return render_template('auth/login.html')

        if not user.is_active:
            logger.warning(f"Login attempt for disabled account: {username}")
            flash('Account is disabled', 'error')
            return render_template('auth/login.html')

        login_user(user, remember=request.form.get('remember') == 'on')
        logger.info(f"Successful login for user: {username}")

        # Redirect to next page or home
        next_page = request.args.get('next')
        if not next_page or urlparse(next_page).netloc != '':
            next_page = url_for('main.index')

        flash(f'Welcome, {user.display_name}!', 'success')
        return redirect(next_page)

    logger.debug("Login page accessed")
    return render_template('auth/login.html')


@auth.route('/register', methods=['GET', 'POST'])
@limiter.limit("5 per minute", methods=['POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    requirements = PasswordValidator.get_requirements_text()

    if request.method == 'POST':
        logger.debug(f"Registration attempt: {sanitize_form_data(request.form)}")
        password = request.form.get('password') or ''
        if password != request.form.get('confirm_password'):
            flash('Passwords do not match', 'error')
            return render_template('auth/register.html', requirements=requirements)

        try:
            context = UserContext.create(
                username=request.form.get('username'),
                email=request.form.get('email'),
                password=password,
                full_name=request.form.get('full_name'),
            )
        except ValueError as e:
            logger.warning(f"Registration rejected: {e}")
            flash(str(e), 'error')
            return render_template('auth/register.html', requirements=requirements)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Registration failed: {sanitize_exception_message(e)}")
            flash('Registration failed, please try again', 'error')
            return render_template('auth/register.html', requirements=requirements)

        flash(f'Account {context.user.username} created. You can now log in.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', requirements=requirements)


@auth.route('/logout')
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    flash('You have been logged out', 'info')
    return redirect(url_for('auth.login'))
