#!/usr/bin/env python3
"""
Web Playground API for Hilbert Checker
Simple Flask server that checks formulas via REST API.

The server keeps one verifier session: accepted formulas accumulate across
requests until /api/reset is called.
"""

import os
import sys

# Add the python directory to path for parser/prover imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
python_dir = os.path.join(project_root, "python")
if python_dir not in sys.path:
    sys.path.insert(0, python_dir)

from flask import Flask, request, jsonify
from parser import ParseError
from axioms import AxiomError
from prover import Verifier, VerifierConfig

app = Flask(__name__)
verifier = Verifier(config=VerifierConfig.from_env())


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/api/submit', methods=['POST'])
def submit_formula():
    """
    Check one formula.

    Request body: { "formula": "p->(q->p)" }

    Response: {
        "ok": true/false,
        "status": "accepted" | "invalid" | "unprovable",
        "formula": "p->(q->p)",
        "message": "...",
        "justification": { "rule": "axiom", "axiom": "K", "bindings": {...}, ... },
        "semantics": { "status": "valid" | "invalid", "model": {...} }  // if unprovable
    }
    """
    data = _json_body()
    if 'formula' not in data:
        return jsonify({
            'ok': False,
            'status': 'error',
            'message': 'Missing "formula" in request body'
        }), 400

    return jsonify(verifier.submit(str(data['formula'])).to_dict())


@app.route('/api/import', methods=['POST'])
def import_formulas():
    """
    Check several formulas in order.

    Request body: { "code": "p->(q->p)\\na->(b->a)" } or { "lines": [...] }
    """
    data = _json_body()
    if isinstance(data.get('lines'), list):
        lines = [str(line) for line in data['lines']]
    elif 'code' in data:
        lines = str(data['code']).splitlines()
    else:
        return jsonify({
            'ok': False,
            'status': 'error',
            'message': 'Missing "code" or "lines" in request body'
        }), 400

    verdicts = verifier.import_lines(lines)
    return jsonify({
        'ok': all(v.ok for v in verdicts),
        'verdicts': [v.to_dict() for v in verdicts],
    })


@app.route('/api/axioms', methods=['GET'])
def list_axioms():
    return jsonify([
        {'name': name, 'template': template}
        for template, name in verifier.list_axioms()
    ])


@app.route('/api/axioms', methods=['POST'])
def add_axiom():
    """Request body: { "name": "I", "template": "p->p", "parameters": ["p"] }"""
    data = _json_body()
    name, template = data.get('name'), data.get('template')
    if not isinstance(name, str) or not isinstance(template, str) or not name or not template:
        return jsonify({
            'ok': False,
            'status': 'error',
            'message': '"name" and "template" must be non-empty strings'
        }), 400

    parameters = data.get('parameters')
    if parameters is not None and not (isinstance(parameters, list)
                                       and all(isinstance(p, str) for p in parameters)):
        return jsonify({
            'ok': False,
            'status': 'error',
            'message': '"parameters" must be a list of identifiers'
        }), 400

    try:
        schema = verifier.add_axiom(name, template, parameters)
    except (ParseError, AxiomError) as e:
        return jsonify({'ok': False, 'status': 'error', 'message': str(e)}), 400

    return jsonify({
        'ok': True,
        'name': schema.name,
        'template': schema.template,
        'parameters': list(schema.parameters),
    }), 201


@app.route('/api/axioms', methods=['DELETE'])
def remove_axiom():
    """Request body: { "axiom": "K" } (a name or a template)"""
    data = _json_body()
    if not isinstance(data.get('axiom'), str) or not data['axiom']:
        return jsonify({
            'ok': False,
            'status': 'error',
            'message': '"axiom" must be a non-empty string'
        }), 400

    try:
        schema = verifier.remove_axiom(data['axiom'])
    except AxiomError as e:
        return jsonify({'ok': False, 'status': 'error', 'message': str(e)}), 404

    return jsonify({'ok': True, 'name': schema.name, 'template': schema.template})


@app.route('/api/export', methods=['GET'])
def export_report():
    return app.response_class(verifier.export(), mimetype='text/plain')


@app.route('/api/reset', methods=['POST'])
def reset():
    """Start a fresh session with the default axioms."""
    global verifier
    verifier = Verifier(config=verifier.config)
    return jsonify({'ok': True})


@app.route('/api/examples', methods=['GET'])
def get_examples():
    """Return a list of example formula lists."""
    examples = [
        {
            'name': 'Axiom K',
            'code': '''# Instances of K with different bindings
p->(q->p)
a->(b->a)'''
        },
        {
            'name': 'Axiom S',
            'code': '''(a->(b->c))->((a->b)->(a->c))'''
        },
        {
            'name': 'Double Negation',
            'code': '''# f is falsum, so (a->f)->f reads "not not a"
((a->f)->f)->a'''
        },
        {
            'name': 'Modus Ponens',
            'code': '''p->(q->p)
(p->(q->p))->(r->(p->(q->p)))
r->(p->(q->p))'''
        },
        {
            'name': 'Not Derivable',
            'code': '''# A free-standing atom is not a theorem
z'''
        }
    ]
    return jsonify(examples)


if __name__ == '__main__':
    print("Hilbert Checker Playground")
    print("   API at http://localhost:5050/api")
    print()
    app.run(host='0.0.0.0', port=5050, debug=True)
