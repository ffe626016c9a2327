# backend/app.py
from flask import Flask, request, jsonify, Response
from flask_cors import CORS
import traceback
import logging

# Import configuration and modules
from config import CONFIG
from geomaps.client import MapsClient
from geomaps.entities import Location
from geomaps.errors import (
    AddressAmbiguous,
    AddressNotFound,
    FetchFailed,
    GeoMapsError,
    InsufficientWaypoints,
    InvalidWaypointType,
    MalformedPolyline,
    NoDirectionsFound,
    UpstreamFormatChanged,
)
from geomaps.utils import safe_jsonify, validate_request_data, request_locations, haversine_distance_km

# Status code for each failure a caller can receive
ERROR_STATUS = {
    InsufficientWaypoints: 400,
    InvalidWaypointType: 400,
    AddressNotFound: 404,
    AddressAmbiguous: 404,
    NoDirectionsFound: 404,
    MalformedPolyline: 502,
    UpstreamFormatChanged: 502,
    FetchFailed: 502,
}


# --- App Initialization and Configuration ---
def create_app():
    app = Flask(__name__)
    app.config.from_mapping(CONFIG)

    # Configure CORS with settings from config
    CORS(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_SETTINGS']['ORIGINS'],
            "methods": app.config['CORS_SETTINGS']['METHODS'],
            "allow_headers": app.config['CORS_SETTINGS']['ALLOW_HEADERS']
        }
    })

    # Configure logging
    handlers = [logging.StreamHandler()]
    if app.config.get('LOG_FILE'):
        handlers.append(logging.FileHandler(app.config['LOG_FILE']))
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    app.config['MAPS_CLIENT'] = MapsClient(config=dict(app.config), logger=app.logger)
    return app

app = create_app()


def maps_client():
    return app.config['MAPS_CLIENT']


def error_response(error):
    status = ERROR_STATUS.get(type(error), 500)
    body = {'success': False, 'error': str(error), 'type': type(error).__name__}
    if isinstance(error, AddressAmbiguous):
        body['candidates'] = error.candidates
    return jsonify(body), status


# --- API Endpoints ---
@app.route('/api/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy'})


@app.route('/api/location', methods=['GET'])
def resolve_location():
    """Resolve a street address to locations."""
    address = request.args.get('address', '').strip()
    if not address:
        return jsonify({'success': False, 'error': "Query parameter 'address' required"}), 400

    try:
        locations = maps_client().resolve_address(address)
        return jsonify({
            'success': True,
            'locations': [loc.to_dict() for loc in locations]
        })
    except GeoMapsError as e:
        app.logger.warning(f"Address resolution failed: {e}")
        return error_response(e)
    except Exception as e:
        error_trace = traceback.format_exc()
        app.logger.error(f"Address resolution failed: {e}\n{error_trace}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/near', methods=['GET'])
def nearby_search():
    """Local search around a point, nearest results first."""
    query = request.args.get('q', '').strip()
    if not query:
        return jsonify({'success': False, 'error': "Query parameter 'q' required"}), 400

    try:
        lat = float(request.args['lat'])
        lng = float(request.args['lng'])
    except (KeyError, ValueError):
        return jsonify({'success': False, 'error': "Numeric 'lat' and 'lng' parameters required"}), 400

    address = request.args.get('address', '').strip()
    origin = Location(latitude=lat, longitude=lng, lines=[address] if address else [])

    try:
        locations = maps_client().find_nearby(origin, query, sort_by_distance=True)
        results = []
        for loc in locations:
            result = loc.to_dict()
            result['distance_km'] = haversine_distance_km(lat, lng, loc.latitude, loc.longitude)
            results.append(result)

        response_data = {'success': True, 'query': query, 'locations': results}
        return Response(safe_jsonify(response_data), content_type='application/json')
    except GeoMapsError as e:
        app.logger.warning(f"Nearby search failed: {e}")
        return error_response(e)
    except Exception as e:
        error_trace = traceback.format_exc()
        app.logger.error(f"Nearby search failed: {e}\n{error_trace}")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/path', methods=['POST'])
def directions():
    """Driving directions through the posted locations."""
    app.logger.info("Directions request received.")

    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'No JSON data provided'}), 400

    is_valid, error_msg = validate_request_data(data, app.config)
    if not is_valid:
        app.logger.warning(f"Invalid request data: {error_msg}")
        return jsonify({'success': False, 'error': error_msg}), 400

    try:
        path = maps_client().get_directions(request_locations(data))
        return jsonify({'success': True, 'path': path.to_dict()})
    except GeoMapsError as e:
        app.logger.warning(f"Directions request failed: {e}")
        return error_response(e)
    except Exception as e:
        error_trace = traceback.format_exc()
        app.logger.error(f"Directions request failed: {e}\n{error_trace}")
        return jsonify({'success': False, 'error': str(e)}), 500


# --- Main Execution ---
if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000, debug=True)
