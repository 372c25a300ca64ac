"""
Pregnancy Calculator API Routes
Due date, gestational age, trimester and milestone windows (ACOG CO 700 redating)
"""
from flask import Blueprint, request, jsonify, current_app
import logging

from pregnancy_calc.services.pregnancy_service import (
    InvalidCalculationMethod,
    PregnancyInputs,
    calculate,
    resolve_method,
)
from pregnancy_calc.utils.ob_calculators import PREGNANCY_MILESTONES, redating_threshold_table

logger = logging.getLogger(__name__)

calculator_bp = Blueprint('calculator', __name__, url_prefix='/api/pregnancy')


@calculator_bp.route('/calculate', methods=['POST'])
def calculate_pregnancy():
    """
    Compute pregnancy dating info

    Request body (JSON):
        method: 'lmp' | 'ultrasound' | 'reverseUltrasound' (default from config)
        lmpDate: YYYY-MM-DD
        ultrasoundDate: YYYY-MM-DD (optional)
        gaWeeks, gaDays: GA at scan (optional, numbers or numeric strings)
        eddDate: YYYY-MM-DD (reverseUltrasound only)

    'data' is null when the primary date is missing or invalid.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({
                'success': False,
                'error': 'Request body must be a JSON object'
            }), 400

        try:
            method = resolve_method(
                data.get('method'),
                default=current_app.config.get('DEFAULT_CALCULATION_METHOD', 'lmp')
            )
        except InvalidCalculationMethod as e:
            return jsonify({
                'success': False,
                'error': str(e)
            }), 400

        info = calculate(
            method,
            PregnancyInputs.from_dict(data),
            clock=current_app.config.get('DATING_CLOCK')
        )

        return jsonify({
            'success': True,
            'method': method.value,
            'data': info.to_dict() if info else None
        })

    except Exception as e:
        logger.error(f"Error calculating pregnancy info: {e}", exc_info=True)
        error_msg = 'Failed to calculate pregnancy info' if not current_app.debug else str(e)
        return jsonify({
            'success': False,
            'error': error_msg
        }), 500


@calculator_bp.route('/milestones', methods=['GET'])
def list_milestones():
    """Milestone catalog, offsets relative to estimated LMP"""
    return jsonify({
        'success': True,
        'data': [m.to_dict() for m in PREGNANCY_MILESTONES]
    })


@calculator_bp.route('/redating-thresholds', methods=['GET'])
def list_redating_thresholds():
    """ACOG redating thresholds by completed LMP weeks"""
    return jsonify({
        'success': True,
        'data': redating_threshold_table()
    })
